"""
Chat message CRUD operations.

Provides append and ordered read of a session's transcript.

Dependencies: sqlalchemy, askdoc.boundary.db.models
System role: Chat transcript persistence operations
"""

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.CRUD.base_crud import BaseCRUD
from askdoc.boundary.db.models.message_model import MessageModel, MessageRole


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def add_message(
        self,
        session: AsyncSession,
        session_id: str,
        role: MessageRole,
        content: str,
        sources: list[dict] | None = None,
    ) -> MessageModel:
        """
        Append a message to a session.

        Args:
            session: Async database session
            session_id: Owning chat session id
            role: user or assistant
            content: Message text
            sources: Citation dicts for assistant answers

        Returns:
            MessageModel: Persisted message
        """
        return await self.create(
            session,
            session_id=session_id,
            role=role,
            content=content,
            sources=sources,
        )

    async def list_by_session(
        self,
        session: AsyncSession,
        session_id: str,
        limit: int | None = None,
    ) -> Sequence[MessageModel]:
        """
        Read a session's messages in chronological order.

        Args:
            session: Async database session
            session_id: Chat session id
            limit: Maximum number of messages to return

        Returns:
            Sequence of MessageModel ordered by created_at ascending
        """
        stmt = (
            select(MessageModel)
            .where(MessageModel.session_id == session_id)
            .order_by(MessageModel.created_at.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_role(self, session: AsyncSession, role: MessageRole) -> int:
        """Count messages authored by a role across all sessions."""
        stmt = select(func.count()).select_from(MessageModel).where(MessageModel.role == role)
        result = await session.execute(stmt)
        return int(result.scalar_one())


message_crud = MessageCRUD()
