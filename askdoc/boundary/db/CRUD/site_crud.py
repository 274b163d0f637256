"""
Site CRUD operations.

Dependencies: sqlalchemy, askdoc.boundary.db.models
System role: Site persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.CRUD.base_crud import BaseCRUD
from askdoc.boundary.db.models.site_model import SiteModel


class SiteCRUD(BaseCRUD[SiteModel]):
    """CRUD operations for SiteModel."""

    def __init__(self) -> None:
        """Initialize SiteCRUD with SiteModel."""
        super().__init__(SiteModel)

    async def list_ordered(self, session: AsyncSession) -> Sequence[SiteModel]:
        """List every site, newest first."""
        stmt = select(SiteModel).order_by(SiteModel.created_at.desc())
        result = await session.execute(stmt)
        return result.scalars().all()


site_crud = SiteCRUD()
