"""
Admin dashboard statistics service.

Dependencies: askdoc.boundary.db.CRUD, askdoc.boundary.rag
System role: Aggregate counts for the admin dashboard
"""

import logging
from collections.abc import Awaitable

from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.CRUD.collection_crud import collection_crud
from askdoc.boundary.db.CRUD.message_crud import message_crud
from askdoc.boundary.db.CRUD.site_crud import site_crud
from askdoc.boundary.db.models.message_model import MessageRole
from askdoc.boundary.rag.orchestrator import Orchestrator
from askdoc.models.common import StatsResponse

logger = logging.getLogger(__name__)


class StatsService:
    """Collects dashboard counts; a failing source reports 0."""

    def __init__(self, db: AsyncSession, orchestrator: Orchestrator | None) -> None:
        self.db = db
        self.orchestrator = orchestrator

    async def _safe_count(self, name: str, pending: Awaitable[int]) -> int:
        try:
            return int(await pending)
        except Exception as e:
            logger.warning("Stats count failed", extra={"count": name, "error": str(e)})
            return 0

    async def _document_total(self) -> int:
        if self.orchestrator is None:
            return 0
        return len(await self.orchestrator.list_documents())

    async def get_stats(self) -> StatsResponse:
        """Count documents, collections, sites and visitor questions."""
        return StatsResponse(
            total_documents=await self._safe_count("documents", self._document_total()),
            total_collections=await self._safe_count("collections", collection_crud.count(self.db)),
            total_sites=await self._safe_count("sites", site_crud.count(self.db)),
            total_chats=await self._safe_count(
                "chats", message_crud.count_by_role(self.db, MessageRole.USER)
            ),
        )
