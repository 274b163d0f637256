"""
Generic CRUD over string-keyed models.

Model-specific CRUD singletons extend BaseCRUD with their own queries.
Writes flush but never commit; services own the transaction.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Shared operations for a model with an ``id`` primary key.

    Attributes:
        model: Mapped class the queries target
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **fields: Any) -> ModelT:
        """
        Insert a row and return it with defaults populated.

        Args:
            session: Async database session
            **fields: Column values

        Returns:
            The flushed and refreshed instance
        """
        instance = self.model(**fields)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: str) -> ModelT | None:
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_all(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        """Unordered page of rows; limit=None returns everything after offset."""
        stmt = select(self.model).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_by_id(self, session: AsyncSession, id: str, **fields: Any) -> ModelT | None:
        """
        Apply a Core UPDATE and return the refreshed row.

        populate_existing makes instances already in the identity map pick up
        the new values, including onupdate timestamps.

        Returns:
            Updated instance, or None when no row has this id
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**fields)
            .returning(self.model)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: str) -> bool:
        """Delete by id; FK ON DELETE rules run in SQLite. True if a row went."""
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def exists(self, session: AsyncSession, id: str) -> bool:
        result = await session.execute(select(self.model.id).where(self.model.id == id))
        return result.scalar_one_or_none() is not None

    async def count(self, session: AsyncSession) -> int:
        """Return the total number of rows."""
        result = await session.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())
