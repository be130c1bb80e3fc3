"""
Health check endpoint.

Provides a liveness probe. The service keeps no state and has no
database, so there is no separate readiness check.
"""

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check Scryfall.
    """
    return HealthResponse(status="healthy")
