"""
Health check endpoints.

Provides endpoints for monitoring service health.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter()


class StatusResponse(BaseModel):
    """Status banner response."""

    status: str
    message: str
    timestamp: str


@router.get("/", response_model=StatusResponse)
@router.get("/health", response_model=StatusResponse)
async def health_check() -> StatusResponse:
    """
    Basic health check endpoint.

    Served on both / and /health.
    """
    return StatusResponse(
        status="OK",
        message="Translation proxy is running!",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness check endpoint.

    Simple check to verify the service is running.
    """
    return {"status": "alive"}
