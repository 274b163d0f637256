"""
Background ingestion queue.

Runs document ingestion as tracked asyncio tasks detached from the upload
request, persists job state, and resolves jobs interrupted by a restart.

Dependencies: asyncio, askdoc.boundary.db, askdoc.boundary.rag
System role: Async job execution for document ingestion
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from askdoc.boundary.db.CRUD.job_crud import job_crud
from askdoc.boundary.db.models.job_model import JobStatus
from askdoc.boundary.rag.orchestrator import Orchestrator
from askdoc.core.exceptions import UpstreamError
from askdoc.models.document import (
    META_CHUNK_COUNT,
    META_ERROR,
    META_STATUS,
    DocumentStatus,
)

logger = logging.getLogger(__name__)

CANCELLED_ERROR = "ingestion cancelled"
RESTART_ERROR = "interrupted by restart"
NO_ORCHESTRATOR_ERROR = "orchestrator not configured"


@dataclass
class IngestionTask:
    """
    Work item for one uploaded file.

    Attributes:
        job_id: Persisted IngestionJobModel id
        document_id: Registered document id
        file_path: Saved original on disk
        metadata: Metadata bag passed to the orchestrator
    """

    job_id: str
    document_id: str
    file_path: str
    metadata: dict[str, Any] = field(default_factory=dict)


class IngestionQueue:
    """
    Executes ingestion tasks in the background.

    Tasks are plain asyncio tasks kept in a set so they are not garbage
    collected and can be cancelled on shutdown. Each task opens its own
    database session; it never shares the upload request's session, so
    cancelling the request does not stop ingestion.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        orchestrator: Orchestrator | None,
    ) -> None:
        """
        Initialize queue.

        Args:
            session_factory: Metadata database session factory
            orchestrator: RAG backend, None in degraded mode
        """
        self._session_factory = session_factory
        self._orchestrator = orchestrator
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def active_count(self) -> int:
        """Number of tasks not yet finished."""
        return len(self._tasks)

    def submit(self, task: IngestionTask) -> asyncio.Task:
        """
        Schedule an ingestion task.

        Args:
            task: Work item for a stored upload

        Returns:
            asyncio.Task: The running task (already tracked)

        Raises:
            RuntimeError: If the queue has been shut down
        """
        if self._closed:
            raise RuntimeError("ingestion queue is shut down")

        runner = asyncio.create_task(self._run(task), name=f"ingest-{task.document_id}")
        self._tasks.add(runner)
        runner.add_done_callback(self._tasks.discard)
        logger.info(
            "Ingestion task submitted",
            extra={"job_id": task.job_id, "document_id": task.document_id},
        )
        return runner

    async def _set_job(self, job_id: str, status: JobStatus, payload: dict | None = None) -> None:
        async with self._session_factory() as db:
            if status == JobStatus.RUNNING:
                await job_crud.mark_running(db, job_id)
            elif status == JobStatus.COMPLETED:
                await job_crud.mark_completed(db, job_id, payload or {})
            else:
                await job_crud.mark_failed(db, job_id, (payload or {}).get("error", ""))
            await db.commit()

    async def _fail(self, task: IngestionTask, error: str) -> None:
        """Record a failure on both the job and the document."""
        if self._orchestrator is not None:
            try:
                await self._orchestrator.update_document_metadata(
                    task.document_id,
                    {META_STATUS: DocumentStatus.FAILED.value, META_ERROR: error},
                )
            except Exception as e:
                logger.error(
                    "Could not mark document failed",
                    extra={"document_id": task.document_id, "error": str(e)},
                )
        await self._set_job(task.job_id, JobStatus.FAILED, {"error": error})
        logger.warning(
            "Ingestion failed",
            extra={"job_id": task.job_id, "document_id": task.document_id, "error": error},
        )

    async def _run(self, task: IngestionTask) -> None:
        """Task body: running → ingest → completed/failed."""
        try:
            await self._set_job(task.job_id, JobStatus.RUNNING)

            if self._orchestrator is None:
                raise UpstreamError(NO_ORCHESTRATOR_ERROR, resource_id=task.document_id)

            await self._orchestrator.update_document_metadata(
                task.document_id, {META_STATUS: DocumentStatus.PROCESSING.value}
            )
            metadata = {**task.metadata, META_STATUS: DocumentStatus.PROCESSING.value}
            result = await self._orchestrator.ingest_file(task.file_path, task.document_id, metadata)

            await self._orchestrator.update_document_metadata(
                task.document_id,
                {
                    META_STATUS: DocumentStatus.READY.value,
                    META_CHUNK_COUNT: result.chunk_count,
                    META_ERROR: None,
                },
            )
            await self._set_job(task.job_id, JobStatus.COMPLETED, {"chunk_count": result.chunk_count})

        except asyncio.CancelledError:
            await asyncio.shield(self._fail(task, CANCELLED_ERROR))
            raise
        except Exception as e:
            await self._fail(task, str(e) or type(e).__name__)
            return

        logger.info(
            "Ingestion completed",
            extra={
                "job_id": task.job_id,
                "document_id": task.document_id,
                "chunk_count": result.chunk_count,
            },
        )

    async def recover(self) -> int:
        """
        Fail jobs a previous process left pending or running.

        Returns:
            int: Number of jobs marked failed
        """
        async with self._session_factory() as db:
            stale = await job_crud.get_unfinished(db)
            for job in stale:
                await job_crud.mark_failed(db, job.id, RESTART_ERROR)
            await db.commit()

        for job in stale:
            if self._orchestrator is not None:
                await self._orchestrator.update_document_metadata(
                    job.document_id,
                    {META_STATUS: DocumentStatus.FAILED.value, META_ERROR: RESTART_ERROR},
                )

        if stale:
            logger.warning("Marked interrupted ingestion jobs failed", extra={"count": len(stale)})
        return len(stale)

    async def join(self) -> None:
        """Wait for every submitted task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self, timeout: float = 5.0) -> None:
        """
        Stop accepting work and cancel tasks still running after timeout.

        Args:
            timeout: Seconds to let in-flight tasks finish first
        """
        self._closed = True
        if not self._tasks:
            return

        pending = list(self._tasks)
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        for runner in still_running:
            runner.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
        logger.info(
            "Ingestion queue shut down",
            extra={"finished": len(pending) - len(still_running), "cancelled": len(still_running)},
        )
