"""
Site service orchestrator.

Coordinates site lifecycle operations and widget config defaults.

Dependencies: askdoc.boundary.db.CRUD
System role: Site use case orchestration
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.CRUD.site_crud import site_crud
from askdoc.boundary.db.models.site_model import (
    DEFAULT_RATE_LIMIT,
    DEFAULT_WIDGET_CONFIG,
    SiteModel,
)
from askdoc.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def site_to_dict(site: SiteModel) -> dict[str, Any]:
    """Flatten a SiteModel into the API field layout."""
    return {
        "id": site.id,
        "name": site.name,
        "domain": site.domain,
        "collection_ids": list(site.collection_ids or []),
        "widget_config": {**DEFAULT_WIDGET_CONFIG, **(site.widget_config or {})},
        "rate_limit": site.rate_limit,
        "created_at": site.created_at,
        "updated_at": site.updated_at,
    }


class SiteService:
    """Site service orchestrator."""

    def __init__(self, db: AsyncSession, default_rate_limit: int = DEFAULT_RATE_LIMIT) -> None:
        """
        Initialize site service.

        Args:
            db: Async SQLAlchemy session
            default_rate_limit: Applied when a site is created with rate_limit 0
        """
        self.db = db
        self.default_rate_limit = default_rate_limit

    async def create_site(
        self,
        name: str,
        domain: str,
        collection_ids: list[str],
        widget_config: dict | None = None,
        rate_limit: int = 0,
    ) -> dict[str, Any]:
        """
        Create a site.

        Args:
            name: Display name
            domain: Embedding host
            collection_ids: Collections searched by chat
            widget_config: Display settings; None uses the defaults
            rate_limit: Requests/hour; 0 uses the default

        Returns:
            dict: Created site
        """
        try:
            site = await site_crud.create(
                self.db,
                name=name,
                domain=domain,
                collection_ids=list(collection_ids),
                widget_config=dict(widget_config) if widget_config else dict(DEFAULT_WIDGET_CONFIG),
                rate_limit=rate_limit or self.default_rate_limit,
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to create site", extra={"error": str(e), "site_name": name})
            raise

        logger.info(
            "Site created",
            extra={"site_id": site.id, "domain": domain, "collections": len(collection_ids)},
        )
        return site_to_dict(site)

    async def get_site(self, site_id: str) -> dict[str, Any]:
        """
        Get site by ID.

        Raises:
            NotFoundError: If site does not exist
        """
        site = await site_crud.get_by_id(self.db, site_id)
        if site is None:
            raise NotFoundError("site not found", site_id)
        return site_to_dict(site)

    async def list_sites(self) -> list[dict[str, Any]]:
        """List every site, newest first."""
        return [site_to_dict(s) for s in await site_crud.list_ordered(self.db)]

    async def update_site(
        self,
        site_id: str,
        name: str | None = None,
        domain: str | None = None,
        collection_ids: list[str] | None = None,
        widget_config: dict | None = None,
        rate_limit: int | None = None,
    ) -> dict[str, Any]:
        """
        Update a site, applying only provided, non-empty fields.

        An explicit empty collection_ids list is applied; rate_limit is
        applied only when positive.

        Raises:
            NotFoundError: If site does not exist
        """
        fields: dict[str, Any] = {}
        if name:
            fields["name"] = name
        if domain:
            fields["domain"] = domain
        if collection_ids is not None:
            fields["collection_ids"] = list(collection_ids)
        if widget_config is not None:
            fields["widget_config"] = dict(widget_config)
        if rate_limit:
            fields["rate_limit"] = rate_limit

        if not fields:
            return await self.get_site(site_id)

        site = await site_crud.update_by_id(self.db, site_id, **fields)
        if site is None:
            raise NotFoundError("site not found", site_id)
        await self.db.commit()

        logger.info("Site updated", extra={"site_id": site_id, "fields": sorted(fields)})
        return site_to_dict(site)

    async def delete_site(self, site_id: str) -> None:
        """
        Delete a site; its sessions keep their messages with site_id nulled.

        Raises:
            NotFoundError: If site does not exist
        """
        deleted = await site_crud.delete_by_id(self.db, site_id)
        if not deleted:
            raise NotFoundError("site not found", site_id)
        await self.db.commit()
        logger.info("Site deleted", extra={"site_id": site_id})
