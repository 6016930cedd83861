"""Health check endpoint."""

from fastapi import APIRouter

from vulnreport.core.config import settings
from vulnreport.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health() -> HealthResponse:
    """Return service health status. Used by load balancers and monitoring."""
    return HealthResponse(status="ok", environment=settings.APP_ENV)
