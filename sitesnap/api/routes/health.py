"""Health check endpoints for API monitoring.

Example:
    GET /health
    Response: {"status": "healthy", "timestamp": "2024-05-01T12:00:00.000Z"}
"""

from fastapi import APIRouter

from sitesnap.api.models.responses import HealthResponse
from sitesnap.services.models import isoformat_utc, utc_now

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
@router.get("/api/archives/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return API health status.

    Example:
        >>> response = client.get("/health")
        >>> response.json()["status"]
        'healthy'
    """
    return HealthResponse(status="healthy", timestamp=isoformat_utc(utc_now()))
