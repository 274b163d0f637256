"""
Ingestion job ORM model.

Persists each background ingestion so a crash mid-task can be detected and
resolved on restart instead of leaving the document stuck in processing.

Dependencies: sqlalchemy, askdoc.boundary.db.base
System role: Async job tracking for document ingestion
"""

import enum

from sqlalchemy import JSON, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from askdoc.boundary.db.base import Base, TimestampMixin, UUIDMixin


class JobStatus(str, enum.Enum):
    """
    Ingestion task execution states.

    PENDING: Submitted to the ingestion queue, not started
    RUNNING: Orchestrator ingest call in flight
    COMPLETED: Document indexed; result holds chunk_count
    FAILED: Ingest failed, was cancelled, or was interrupted by a restart
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class IngestionJobModel(Base, UUIDMixin, TimestampMixin):
    """
    Ingestion job linking a stored upload to its background task.

    Attributes:
        id: UUID string primary key (auto-generated)
        document_id: Orchestrator document id (unique; one job per upload)
        collection_id: Owning collection at upload time
        file_path: Saved original on disk
        status: PENDING/RUNNING/COMPLETED/FAILED
        result: JSON; {"chunk_count": n} on success, {"error": "..."} on failure
        created_at: Submission timestamp (UTC)
        updated_at: Last status change (UTC)

    Workflow:
        1. Upload handler saves the file, creates the job (PENDING), submits it
        2. Queue task marks RUNNING and calls the orchestrator
        3. Task marks COMPLETED or FAILED and mirrors status onto the document
        4. On startup, PENDING/RUNNING leftovers are marked FAILED
    """

    __tablename__ = "ingestion_jobs"

    document_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        unique=True,
        index=True,
    )

    collection_id: Mapped[str] = mapped_column(String(36), nullable=False)

    file_path: Mapped[str] = mapped_column(String(1024), nullable=False)

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=JobStatus.PENDING,
    )

    result: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Job result or error details",
    )
