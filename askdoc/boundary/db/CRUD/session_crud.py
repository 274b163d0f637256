"""
Chat session CRUD operations.

Dependencies: sqlalchemy, askdoc.boundary.db.models
System role: Session persistence operations
"""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.base import utcnow
from askdoc.boundary.db.CRUD.base_crud import BaseCRUD
from askdoc.boundary.db.models.session_model import SessionModel


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with the per-turn timestamp bump and site-scoped counts.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def touch(self, session: AsyncSession, id: str) -> bool:
        """
        Bump a session's updated_at to now.

        Args:
            session: Async database session
            id: Session id

        Returns:
            True if the session exists
        """
        stmt = update(SessionModel).where(SessionModel.id == id).values(updated_at=utcnow())
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def count_by_site(self, session: AsyncSession, site_id: str) -> int:
        """Count sessions opened through a site."""
        stmt = select(func.count()).select_from(SessionModel).where(SessionModel.site_id == site_id)
        result = await session.execute(stmt)
        return int(result.scalar_one())


session_crud = SessionCRUD()
