"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter

from reposcope import __version__

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Basic health check for load balancers."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }
