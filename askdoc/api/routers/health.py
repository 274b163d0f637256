"""
Health check API endpoint.

Routes: GET /health

System role: Liveness probe
"""

from fastapi import APIRouter

from askdoc.models.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="ok")
