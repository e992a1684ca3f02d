from datetime import datetime, timezone

from fastapi import APIRouter

from app.schemas.analyze import HealthResponse

SERVICE_NAME = "pulsetag-service"
SERVICE_VERSION = "0.1.0"

router = APIRouter(tags=["health"])


def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        name=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return _health()


@router.get("/api/health", response_model=HealthResponse)
async def api_health_check():
    """Health check under the /api prefix used by the frontend."""
    return _health()
