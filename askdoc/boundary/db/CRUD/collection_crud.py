"""
Collection CRUD operations.

Extends BaseCRUD with ordered listing and the document counter mutations
used by the ingestion workflow.

Dependencies: sqlalchemy, askdoc.boundary.db.models
System role: Collection persistence operations
"""

from typing import Sequence

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.CRUD.base_crud import BaseCRUD
from askdoc.boundary.db.models.collection_model import CollectionModel


class CollectionCRUD(BaseCRUD[CollectionModel]):
    """CRUD operations for CollectionModel."""

    def __init__(self) -> None:
        """Initialize CollectionCRUD with CollectionModel."""
        super().__init__(CollectionModel)

    async def list_ordered(self, session: AsyncSession) -> Sequence[CollectionModel]:
        """
        List every collection, newest first.

        Args:
            session: Async database session

        Returns:
            Sequence of CollectionModel ordered by created_at descending
        """
        stmt = select(CollectionModel).order_by(CollectionModel.created_at.desc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def increment_document_count(self, session: AsyncSession, id: str) -> bool:
        """
        Add one to a collection's document_count.

        Args:
            session: Async database session
            id: Collection id

        Returns:
            True if the collection exists
        """
        stmt = (
            update(CollectionModel)
            .where(CollectionModel.id == id)
            .values(document_count=CollectionModel.document_count + 1)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def decrement_document_count(self, session: AsyncSession, id: str) -> bool:
        """
        Subtract one from a collection's document_count, never below zero.

        Args:
            session: Async database session
            id: Collection id

        Returns:
            True if the collection exists
        """
        stmt = (
            update(CollectionModel)
            .where(CollectionModel.id == id)
            .values(
                document_count=case(
                    (CollectionModel.document_count > 0, CollectionModel.document_count - 1),
                    else_=0,
                )
            )
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


collection_crud = CollectionCRUD()
