"""
Document and ingestion job schemas.

Documents are owned by the orchestrator; these models describe the
tagged metadata this service reads back from it.

Dependencies: pydantic
System role: Document request/response validation
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class DocumentStatus(str, Enum):
    """Ingestion lifecycle of a document."""

    PENDING = "pending"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


# Metadata keys written onto orchestrator documents
META_COLLECTION_ID = "collection_id"
META_FILENAME = "filename"
META_FILE_TYPE = "file_type"
META_FILE_SIZE = "file_size"
META_STATUS = "status"
META_CHUNK_COUNT = "chunk_count"
META_ERROR = "error"

RESERVED_METADATA_KEYS = frozenset(
    {
        META_COLLECTION_ID,
        META_FILENAME,
        META_FILE_TYPE,
        META_FILE_SIZE,
        META_STATUS,
        META_CHUNK_COUNT,
        META_ERROR,
    }
)


class Document(BaseModel):
    """
    A document as exposed by the admin API.

    Attributes:
        id: Document id (also the stored file's basename)
        collection_id: Owning collection
        filename: Original upload filename
        file_type: pdf, md, txt, html or adoc
        file_size: Upload size in bytes
        status: pending, processing, ready or failed
        chunk_count: Number of indexed chunks once ready
        metadata: Caller-supplied extra metadata
        error: Failure reason when status is failed
    """

    id: str
    collection_id: str = ""
    filename: str = ""
    file_type: str = ""
    file_size: int = 0
    status: DocumentStatus = DocumentStatus.READY
    chunk_count: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_metadata(
        cls,
        id: str,
        metadata: dict[str, Any],
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "Document":
        """
        Build a Document from an orchestrator metadata bag.

        Reserved keys map onto typed fields; everything else stays in
        metadata. A missing status reads as ready.
        """
        extra = {k: v for k, v in metadata.items() if k not in RESERVED_METADATA_KEYS}
        return cls(
            id=id,
            collection_id=str(metadata.get(META_COLLECTION_ID) or ""),
            filename=str(metadata.get(META_FILENAME) or ""),
            file_type=str(metadata.get(META_FILE_TYPE) or ""),
            file_size=int(metadata.get(META_FILE_SIZE) or 0),
            status=metadata.get(META_STATUS) or DocumentStatus.READY,
            chunk_count=int(metadata.get(META_CHUNK_COUNT) or 0),
            metadata=extra,
            error=metadata.get(META_ERROR) or None,
            created_at=created_at,
            updated_at=updated_at,
        )


class DocumentListResponse(BaseModel):
    """One page of a collection's documents."""

    documents: list[Document]
    total: int
    page: int
    page_size: int


class IngestionJobResponse(BaseModel):
    """Background ingestion job state for polling."""

    id: str
    document_id: str
    collection_id: str
    status: str
    result: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime
