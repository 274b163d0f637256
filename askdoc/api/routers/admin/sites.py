"""
Site admin endpoints.

Routes:
- POST /sites - Create site
- GET /sites - List sites
- GET /sites/{id} - Get site
- PUT /sites/{id} - Update site
- DELETE /sites/{id} - Delete site

Dependencies: askdoc.application.services, askdoc.models
System role: Site management HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from askdoc.api.deps.dependencies import get_site_service
from askdoc.api.routers.error_handling import handle_api_errors
from askdoc.application.services.site_service import SiteService
from askdoc.models.common import MessageResponse
from askdoc.models.site import (
    CreateSiteRequest,
    SiteListResponse,
    SiteResponse,
    UpdateSiteRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sites", tags=["sites"])


@router.post("", response_model=SiteResponse, status_code=201)
@handle_api_errors
async def create_site(
    request: CreateSiteRequest,
    site_service: SiteService = Depends(get_site_service),
) -> SiteResponse:
    """
    Create a site.

    Omitted widget_config uses the defaults; rate_limit 0 uses the
    configured default.

    Returns:
        SiteResponse: Created site
    """
    site = await site_service.create_site(
        name=request.name,
        domain=request.domain,
        collection_ids=request.collection_ids,
        widget_config=request.widget_config.model_dump() if request.widget_config else None,
        rate_limit=request.rate_limit,
    )
    return SiteResponse(**site)


@router.get("", response_model=SiteListResponse)
@handle_api_errors
async def list_sites(
    site_service: SiteService = Depends(get_site_service),
) -> SiteListResponse:
    """List all sites, newest first."""
    return SiteListResponse(sites=[SiteResponse(**s) for s in await site_service.list_sites()])


@router.get("/{site_id}", response_model=SiteResponse)
@handle_api_errors
async def get_site(
    site_id: str,
    site_service: SiteService = Depends(get_site_service),
) -> SiteResponse:
    """Get a site."""
    return SiteResponse(**await site_service.get_site(site_id))


@router.put("/{site_id}", response_model=SiteResponse)
@handle_api_errors
async def update_site(
    site_id: str,
    request: UpdateSiteRequest,
    site_service: SiteService = Depends(get_site_service),
) -> SiteResponse:
    """
    Update a site; empty fields keep their current value.

    Raises:
        HTTPException(404): Site not found
    """
    site = await site_service.update_site(
        site_id,
        name=request.name,
        domain=request.domain,
        collection_ids=request.collection_ids,
        widget_config=request.widget_config.model_dump() if request.widget_config else None,
        rate_limit=request.rate_limit,
    )
    return SiteResponse(**site)


@router.delete("/{site_id}", response_model=MessageResponse)
@handle_api_errors
async def delete_site(
    site_id: str,
    site_service: SiteService = Depends(get_site_service),
) -> MessageResponse:
    """Delete a site."""
    await site_service.delete_site(site_id)
    return MessageResponse(message="site deleted")
