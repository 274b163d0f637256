"""
Collection ORM model.

Represents a named group of documents with its own retrieval scope.

Dependencies: sqlalchemy, askdoc.boundary.db.base
System role: Collection persistence
"""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from askdoc.boundary.db.base import Base, TimestampMixin, UUIDMixin


class CollectionModel(Base, UUIDMixin, TimestampMixin):
    """
    Collection ORM model.

    Documents themselves live in the orchestrator's registry; this row only
    carries descriptive fields and a derived counter that the ingestion
    workflow increments on upload and decrements on delete. Deleting a
    collection does not cascade to its documents.

    Attributes:
        id: UUID string primary key (auto-generated)
        name: Collection name (255 char limit)
        description: Optional free-text description
        collection_metadata: JSON map of caller-defined fields
        document_count: Number of documents uploaded minus deleted
        created_at: Creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    __tablename__ = "collections"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Collection name",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        doc="Collection description",
    )

    collection_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
        doc="Caller-defined metadata",
    )

    document_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Uploads minus deletes",
    )
