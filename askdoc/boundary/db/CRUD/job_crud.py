"""
Ingestion job CRUD operations.

Provides status transitions for background ingestion and the startup
query for jobs a previous process left unfinished.

Dependencies: sqlalchemy, askdoc.boundary.db.models
System role: Job persistence operations for async task tracking
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.CRUD.base_crud import BaseCRUD
from askdoc.boundary.db.models.job_model import IngestionJobModel, JobStatus


class JobCRUD(BaseCRUD[IngestionJobModel]):
    """
    CRUD operations for IngestionJobModel.

    Extends BaseCRUD with document correlation and status tracking.
    """

    def __init__(self) -> None:
        """Initialize JobCRUD with IngestionJobModel."""
        super().__init__(IngestionJobModel)

    async def get_by_document_id(
        self,
        session: AsyncSession,
        document_id: str,
    ) -> IngestionJobModel | None:
        """
        Retrieve the job created for a document upload.

        Args:
            session: Async database session
            document_id: Orchestrator document id

        Returns:
            IngestionJobModel if found, None otherwise
        """
        stmt = select(IngestionJobModel).where(IngestionJobModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_unfinished(self, session: AsyncSession) -> Sequence[IngestionJobModel]:
        """
        Retrieve jobs still PENDING or RUNNING.

        Args:
            session: Async database session

        Returns:
            Sequence of unfinished jobs, oldest first
        """
        stmt = (
            select(IngestionJobModel)
            .where(IngestionJobModel.status.in_([JobStatus.PENDING, JobStatus.RUNNING]))
            .order_by(IngestionJobModel.created_at.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_status(
        self,
        session: AsyncSession,
        id: str,
        status: JobStatus,
        result_data: dict | None = None,
    ) -> IngestionJobModel | None:
        """
        Update job execution status with optional result.

        Args:
            session: Async database session
            id: Job id
            status: New execution status
            result_data: Job result or error details

        Returns:
            Updated IngestionJobModel if found, None otherwise
        """
        update_fields: dict = {"status": status}
        if result_data is not None:
            update_fields["result"] = result_data
        return await self.update_by_id(session, id, **update_fields)

    async def mark_running(self, session: AsyncSession, id: str) -> IngestionJobModel | None:
        """Mark job as running."""
        return await self.update_status(session, id, JobStatus.RUNNING)

    async def mark_completed(
        self,
        session: AsyncSession,
        id: str,
        result_data: dict,
    ) -> IngestionJobModel | None:
        """Mark job as successfully completed with result."""
        return await self.update_status(session, id, JobStatus.COMPLETED, result_data)

    async def mark_failed(
        self,
        session: AsyncSession,
        id: str,
        error: str,
    ) -> IngestionJobModel | None:
        """Mark job as failed with an error message."""
        return await self.update_status(session, id, JobStatus.FAILED, {"error": error})


job_crud = JobCRUD()
