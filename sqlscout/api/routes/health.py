"""
Health Check Routes

FastAPI endpoint for service liveness.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, status

from sqlscout import __version__
from sqlscout.models.api import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    """
    Basic liveness check.

    The service keeps no connections of its own, so being able to answer
    is the whole check.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
    )
