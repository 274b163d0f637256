"""
Document registry.

The orchestrator's own record of ingested documents: one row per document
holding its metadata bag, stored in a SQLite file separate from the
metadata database.

Dependencies: sqlalchemy, aiosqlite
System role: Document ownership for the RAG orchestrator
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from sqlalchemy import JSON, DateTime, String, delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from askdoc.boundary.db.base import utcnow
from askdoc.models.document import META_COLLECTION_ID, Document


class RegistryBase(DeclarativeBase):
    """Declarative base for the registry database (kept apart from metadata tables)."""

    pass


class RegisteredDocumentModel(RegistryBase):
    """
    Registry row for one document.

    Attributes:
        id: Document id
        collection_id: Copy of metadata["collection_id"] for indexed filtering
        doc_metadata: Metadata bag (filename, file_type, status, chunk_count, ...)
        created_at: Registration timestamp (UTC)
        updated_at: Last metadata change (UTC)
    """

    __tablename__ = "rag_documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    collection_id: Mapped[str] = mapped_column(String(36), nullable=False, default="", index=True)
    doc_metadata: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def to_document(self) -> Document:
        return Document.from_metadata(
            self.id,
            self.doc_metadata or {},
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class DocumentRegistry:
    """Async access to the registry database."""

    def __init__(self, db_path: str) -> None:
        """
        Open (and create if needed) the registry database.

        Args:
            db_path: SQLite file path, or ':memory:'
        """
        if db_path == ":memory:":
            self._engine: AsyncEngine = create_async_engine(
                "sqlite+aiosqlite:///:memory:",
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_async_engine(f"sqlite+aiosqlite:///{path}")
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    async def initialize(self) -> None:
        """Create the documents table if missing."""
        async with self._engine.begin() as conn:
            await conn.run_sync(RegistryBase.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    async def create(self, document_id: str, metadata: dict[str, Any]) -> Document:
        """Register a new document with its initial metadata."""
        async with self._session_factory() as session:
            row = RegisteredDocumentModel(
                id=document_id,
                collection_id=str(metadata.get(META_COLLECTION_ID) or ""),
                doc_metadata=dict(metadata),
            )
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return row.to_document()

    async def get(self, document_id: str) -> Document | None:
        async with self._session_factory() as session:
            row = await session.get(RegisteredDocumentModel, document_id)
            return row.to_document() if row else None

    async def list_documents(self, collection_id: str | None = None) -> list[Document]:
        """
        List documents, newest first.

        Args:
            collection_id: Restrict to one collection (None = all)

        Returns:
            list[Document]: Registered documents
        """
        stmt = select(RegisteredDocumentModel).order_by(RegisteredDocumentModel.created_at.desc())
        if collection_id is not None:
            stmt = stmt.where(RegisteredDocumentModel.collection_id == collection_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows: Sequence[RegisteredDocumentModel] = result.scalars().all()
            return [row.to_document() for row in rows]

    async def merge_metadata(self, document_id: str, updates: dict[str, Any]) -> Document | None:
        """
        Merge keys into a document's metadata bag.

        Keys mapped to None are removed.

        Returns:
            Document | None: Updated document, None if unknown
        """
        async with self._session_factory() as session:
            row = await session.get(RegisteredDocumentModel, document_id)
            if row is None:
                return None
            merged = dict(row.doc_metadata or {})
            for key, value in updates.items():
                if value is None:
                    merged.pop(key, None)
                else:
                    merged[key] = value
            row.doc_metadata = merged
            row.collection_id = str(merged.get(META_COLLECTION_ID) or "")
            await session.commit()
            await session.refresh(row)
            return row.to_document()

    async def delete(self, document_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(RegisteredDocumentModel).where(RegisteredDocumentModel.id == document_id)
            )
            await session.commit()
            return result.rowcount > 0
