"""
Test suite for IngestService and IngestionQueue.

Covers upload storage and bookkeeping, background task outcomes, restart
recovery and document deletion.

System role: Verification of the document ingestion workflow
"""

import asyncio
from pathlib import Path

import pytest

from askdoc.application.ingestion_queue import (
    CANCELLED_ERROR,
    RESTART_ERROR,
    IngestionQueue,
    IngestionTask,
)
from askdoc.application.services.ingest_service import IngestService
from askdoc.boundary.db.CRUD.collection_crud import collection_crud
from askdoc.boundary.db.CRUD.job_crud import job_crud
from askdoc.boundary.db.models.job_model import JobStatus
from askdoc.core.exceptions import NotFoundError, UnsupportedFileTypeError, UpstreamError
from askdoc.models.document import DocumentStatus

from tests.conftest import collection_metadata


@pytest.fixture
async def collection_id(session_factory) -> str:
    async with session_factory() as db:
        collection = await collection_crud.create(db, name="Docs", description="", collection_metadata={})
        await db.commit()
        return collection.id


@pytest.fixture
def queue(session_factory, fake_orchestrator) -> IngestionQueue:
    return IngestionQueue(session_factory, fake_orchestrator)


@pytest.fixture
def storage(tmp_path) -> Path:
    return tmp_path / "documents"


async def _upload(session_factory, orchestrator, queue, storage, collection_id, filename="guide.md"):
    async with session_factory() as db:
        service = IngestService(db=db, orchestrator=orchestrator, queue=queue, storage_root=str(storage))
        return await service.upload_document(collection_id, filename, b"# Title\n\nBody", {"lang": "en"})


class TestUploadDocument:
    """Test suite for IngestService.upload_document()."""

    @pytest.mark.asyncio
    async def test_upload_should_store_register_and_count(
        self, session_factory, fake_orchestrator, queue, storage, collection_id
    ) -> None:
        # Act
        document = await _upload(session_factory, fake_orchestrator, queue, storage, collection_id)
        await queue.join()

        # Assert
        assert document.status is DocumentStatus.PENDING
        assert (storage / collection_id / f"{document.id}.md").read_bytes() == b"# Title\n\nBody"
        async with session_factory() as db:
            collection = await collection_crud.get_by_id(db, collection_id)
            job = await job_crud.get_by_document_id(db, document.id)
        assert collection.document_count == 1
        assert job.status is JobStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_ingest_should_receive_metadata_bag(
        self, session_factory, fake_orchestrator, queue, storage, collection_id
    ) -> None:
        # Act
        document = await _upload(session_factory, fake_orchestrator, queue, storage, collection_id)
        await queue.join()

        # Assert
        path, document_id, metadata = fake_orchestrator.ingested[0]
        assert document_id == document.id
        assert path.endswith(f"{document.id}.md")
        assert metadata["collection_id"] == collection_id
        assert metadata["file_type"] == "md"
        assert metadata["lang"] == "en"
        stored = await fake_orchestrator.get_document(document.id)
        assert stored.status is DocumentStatus.READY
        assert stored.chunk_count == fake_orchestrator.chunk_count

    @pytest.mark.asyncio
    async def test_unsupported_type_should_raise_before_writing(
        self, session_factory, fake_orchestrator, queue, storage, collection_id
    ) -> None:
        # Act & Assert
        with pytest.raises(UnsupportedFileTypeError):
            await _upload(session_factory, fake_orchestrator, queue, storage, collection_id, filename="a.docx")
        assert not storage.exists()
        assert fake_orchestrator.documents == {}

    @pytest.mark.asyncio
    async def test_unknown_collection_should_raise(self, session_factory, fake_orchestrator, queue, storage) -> None:
        # Act & Assert
        with pytest.raises(NotFoundError):
            await _upload(session_factory, fake_orchestrator, queue, storage, "missing")


class TestIngestionQueue:
    """Test suite for IngestionQueue task outcomes."""

    @pytest.mark.asyncio
    async def test_failed_ingest_should_mark_document_and_job(
        self, session_factory, fake_orchestrator, queue, storage, collection_id
    ) -> None:
        # Arrange
        fake_orchestrator.ingest_error = UpstreamError("document contains no extractable text")

        # Act
        document = await _upload(session_factory, fake_orchestrator, queue, storage, collection_id)
        await queue.join()

        # Assert
        stored = await fake_orchestrator.get_document(document.id)
        assert stored.status is DocumentStatus.FAILED
        assert stored.error == "document contains no extractable text"
        async with session_factory() as db:
            job = await job_crud.get_by_document_id(db, document.id)
        assert job.status is JobStatus.FAILED
        assert job.result == {"error": "document contains no extractable text"}

    @pytest.mark.asyncio
    async def test_failure_after_ingest_should_fail_job(
        self, session_factory, fake_orchestrator, queue, storage, collection_id, monkeypatch
    ) -> None:
        # Arrange
        original_update = fake_orchestrator.update_document_metadata

        async def update_rejecting_ready(document_id, updates):
            if updates.get("status") == DocumentStatus.READY.value:
                raise RuntimeError("registry locked")
            return await original_update(document_id, updates)

        monkeypatch.setattr(fake_orchestrator, "update_document_metadata", update_rejecting_ready)

        # Act
        document = await _upload(session_factory, fake_orchestrator, queue, storage, collection_id)
        await queue.join()

        # Assert
        stored = await fake_orchestrator.get_document(document.id)
        assert stored.status is DocumentStatus.FAILED
        assert stored.error == "registry locked"
        async with session_factory() as db:
            job = await job_crud.get_by_document_id(db, document.id)
        assert job.status is JobStatus.FAILED
        assert job.result == {"error": "registry locked"}

    @pytest.mark.asyncio
    async def test_job_should_fail_even_if_document_update_fails(
        self, session_factory, fake_orchestrator, queue, storage, collection_id, monkeypatch
    ) -> None:
        # Arrange
        async def update_always_failing(document_id, updates):
            raise RuntimeError("registry unavailable")

        monkeypatch.setattr(fake_orchestrator, "update_document_metadata", update_always_failing)

        # Act
        document = await _upload(session_factory, fake_orchestrator, queue, storage, collection_id)
        await queue.join()

        # Assert
        async with session_factory() as db:
            job = await job_crud.get_by_document_id(db, document.id)
        assert job.status is JobStatus.FAILED
        assert job.result == {"error": "registry unavailable"}
        assert fake_orchestrator.ingested == []

    @pytest.mark.asyncio
    async def test_shutdown_should_cancel_running_tasks(self, session_factory, fake_orchestrator, collection_id) -> None:
        # Arrange
        started = asyncio.Event()

        async def slow_ingest(path, document_id, metadata):
            started.set()
            await asyncio.sleep(30)

        fake_orchestrator.ingest_file = slow_ingest
        await fake_orchestrator.register_document("doc-1", collection_metadata(collection_id))
        async with session_factory() as db:
            job = await job_crud.create(
                db, document_id="doc-1", collection_id=collection_id, file_path="/tmp/x.md", result={}
            )
            await db.commit()
        queue = IngestionQueue(session_factory, fake_orchestrator)
        queue.submit(IngestionTask(job_id=job.id, document_id="doc-1", file_path="/tmp/x.md"))
        await started.wait()

        # Act
        await queue.shutdown(timeout=0.01)

        # Assert
        assert queue.active_count == 0
        stored = await fake_orchestrator.get_document("doc-1")
        assert stored.status is DocumentStatus.FAILED
        assert stored.error == CANCELLED_ERROR
        with pytest.raises(RuntimeError):
            queue.submit(IngestionTask(job_id=job.id, document_id="doc-1", file_path="/tmp/x.md"))

    @pytest.mark.asyncio
    async def test_recover_should_fail_unfinished_jobs(self, session_factory, fake_orchestrator, collection_id) -> None:
        # Arrange
        await fake_orchestrator.register_document("stale", collection_metadata(collection_id, status="processing"))
        await fake_orchestrator.register_document("done", collection_metadata(collection_id, status="ready"))
        async with session_factory() as db:
            await job_crud.create(
                db, document_id="stale", collection_id=collection_id, file_path="a", status=JobStatus.RUNNING, result={}
            )
            await job_crud.create(
                db, document_id="done", collection_id=collection_id, file_path="b", status=JobStatus.COMPLETED, result={}
            )
            await db.commit()

        # Act
        recovered = await IngestionQueue(session_factory, fake_orchestrator).recover()

        # Assert
        assert recovered == 1
        stale = await fake_orchestrator.get_document("stale")
        assert stale.status is DocumentStatus.FAILED
        assert stale.error == RESTART_ERROR
        assert (await fake_orchestrator.get_document("done")).status is DocumentStatus.READY


class TestDeleteDocument:
    """Test suite for IngestService.delete_document()."""

    @pytest.mark.asyncio
    async def test_delete_should_remove_everything(
        self, session_factory, fake_orchestrator, queue, storage, collection_id
    ) -> None:
        # Arrange
        document = await _upload(session_factory, fake_orchestrator, queue, storage, collection_id)
        await queue.join()

        # Act
        async with session_factory() as db:
            service = IngestService(db=db, orchestrator=fake_orchestrator, queue=queue, storage_root=str(storage))
            await service.delete_document(document.id)

        # Assert
        assert not (storage / collection_id / f"{document.id}.md").exists()
        async with session_factory() as db:
            assert (await collection_crud.get_by_id(db, collection_id)).document_count == 0

    @pytest.mark.asyncio
    async def test_delete_should_tolerate_missing_original(
        self, session_factory, fake_orchestrator, queue, storage, collection_id
    ) -> None:
        # Arrange
        await fake_orchestrator.register_document("orphan", collection_metadata(collection_id, file_type="pdf"))

        # Act
        async with session_factory() as db:
            service = IngestService(db=db, orchestrator=fake_orchestrator, queue=queue, storage_root=str(storage))
            await service.delete_document("orphan")

        # Assert
        assert fake_orchestrator.deleted == ["orphan"]
        async with session_factory() as db:
            assert (await collection_crud.get_by_id(db, collection_id)).document_count == 0
