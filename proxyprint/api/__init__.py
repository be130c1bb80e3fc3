from proxyprint.api.cards import router as cards_router
from proxyprint.api.health import router as health_router
from proxyprint.api.pdf import router as pdf_router

__all__ = [
    "cards_router",
    "health_router",
    "pdf_router",
]
