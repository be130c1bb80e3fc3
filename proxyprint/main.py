from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from proxyprint.api import cards_router, health_router, pdf_router
from proxyprint.config import settings

app = FastAPI(
    title=settings.app_name,
    version=pkg_version("proxyprint"),
)

app.include_router(cards_router)
app.include_router(health_router)
app.include_router(pdf_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
