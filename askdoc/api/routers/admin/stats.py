"""
Dashboard statistics endpoint.

Routes: GET /stats

System role: Admin dashboard counts
"""

from fastapi import APIRouter, Depends

from askdoc.api.deps.dependencies import get_stats_service
from askdoc.api.routers.error_handling import handle_api_errors
from askdoc.application.services.stats_service import StatsService
from askdoc.models.common import StatsResponse

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
@handle_api_errors
async def get_stats(
    stats_service: StatsService = Depends(get_stats_service),
) -> StatsResponse:
    """Document, collection, site and chat totals."""
    return await stats_service.get_stats()
