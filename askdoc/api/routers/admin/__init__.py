"""
Admin API.

Every route under /api/admin requires the admin API key when one is
configured.
"""

from fastapi import APIRouter, Depends

from askdoc.api.middleware.auth import require_api_key

from .collections import router as collections_router
from .documents import router as documents_router
from .sites import router as sites_router
from .stats import router as stats_router

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_api_key)])
router.include_router(collections_router)
router.include_router(documents_router)
router.include_router(sites_router)
router.include_router(stats_router)

__all__ = ["router"]
