"""
Document ingestion service.

Stores uploaded originals, registers them with the orchestrator and hands
them to the background ingestion queue; also serves document reads and
deletes for the admin API.

Dependencies: askdoc.boundary.db, askdoc.boundary.rag, askdoc.application.ingestion_queue
System role: Document upload and lifecycle orchestration
"""

import logging
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.application.ingestion_queue import IngestionQueue, IngestionTask
from askdoc.boundary.db.CRUD.collection_crud import collection_crud
from askdoc.boundary.db.CRUD.job_crud import job_crud
from askdoc.boundary.db.models.job_model import JobStatus
from askdoc.boundary.db.base import new_id, utcnow
from askdoc.boundary.rag.orchestrator import Orchestrator
from askdoc.core.exceptions import NotFoundError
from askdoc.core.file_types import CLEANUP_EXTENSIONS, EXTENSION_TO_TYPE, detect_file_type
from askdoc.models.document import (
    META_COLLECTION_ID,
    META_FILE_SIZE,
    META_FILE_TYPE,
    META_FILENAME,
    META_STATUS,
    Document,
    DocumentListResponse,
    DocumentStatus,
    IngestionJobResponse,
    RESERVED_METADATA_KEYS,
)

logger = logging.getLogger(__name__)


def _extension_for(file_type: str) -> str | None:
    """First extension registered for a document type."""
    for ext, type_name in EXTENSION_TO_TYPE.items():
        if type_name == file_type:
            return ext
    return None


class IngestService:
    """
    Document ingestion service.

    Uploads are validated and written to disk inside the request; parsing,
    chunking and indexing run later on the IngestionQueue.
    """

    def __init__(
        self,
        db: AsyncSession,
        orchestrator: Orchestrator | None,
        queue: IngestionQueue,
        storage_root: str,
    ) -> None:
        """
        Initialize ingest service.

        Args:
            db: Async SQLAlchemy session
            orchestrator: RAG backend, None in degraded mode
            queue: Background ingestion queue
            storage_root: Root directory for stored originals
        """
        self.db = db
        self.orchestrator = orchestrator
        self.queue = queue
        self.storage_root = Path(storage_root)

    def _document_path(self, collection_id: str, document_id: str, ext: str) -> Path:
        return self.storage_root / collection_id / f"{document_id}{ext}"

    async def upload_document(
        self,
        collection_id: str,
        filename: str,
        content: bytes,
        metadata: dict[str, Any] | None = None,
    ) -> Document:
        """
        Store an upload and schedule its ingestion.

        Args:
            collection_id: Target collection
            filename: Original upload filename
            content: Raw file bytes
            metadata: Caller-supplied extra metadata

        Returns:
            Document: The registered document, status pending

        Raises:
            NotFoundError: If the collection does not exist
            UnsupportedFileTypeError: If the extension is not supported
        """
        if not await collection_crud.exists(self.db, collection_id):
            raise NotFoundError("collection not found", collection_id)

        file_type = detect_file_type(filename)
        ext = Path(filename).suffix.lower()

        document_id = new_id()
        file_path = self._document_path(collection_id, document_id, ext)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(content)

        logger.info(
            "Upload stored",
            extra={
                "collection_id": collection_id,
                "document_id": document_id,
                "document_name": filename,
                "size": len(content),
            },
        )

        extras = {k: v for k, v in (metadata or {}).items() if k not in RESERVED_METADATA_KEYS}
        doc_metadata = {
            **extras,
            META_COLLECTION_ID: collection_id,
            META_FILENAME: filename,
            META_FILE_TYPE: file_type,
            META_FILE_SIZE: len(content),
            META_STATUS: DocumentStatus.PENDING.value,
        }

        if self.orchestrator is not None:
            document = await self.orchestrator.register_document(document_id, doc_metadata)
        else:
            now = utcnow()
            document = Document.from_metadata(document_id, doc_metadata, created_at=now, updated_at=now)

        try:
            await collection_crud.increment_document_count(self.db, collection_id)
            job = await job_crud.create(
                self.db,
                document_id=document_id,
                collection_id=collection_id,
                file_path=str(file_path),
                status=JobStatus.PENDING,
                result={},
            )
            # Committed before submit so the task's own session sees the job
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(
                "Failed to record upload",
                extra={"document_id": document_id, "error": str(e)},
            )
            raise

        self.queue.submit(
            IngestionTask(
                job_id=job.id,
                document_id=document_id,
                file_path=str(file_path),
                metadata=doc_metadata,
            )
        )
        return document

    async def list_documents(self, collection_id: str, page: int, page_size: int) -> DocumentListResponse:
        """
        Return one page of a collection's documents, newest first.

        Args:
            collection_id: Collection to list
            page: 1-based page number
            page_size: Documents per page

        Returns:
            DocumentListResponse: Page slice with the unpaginated total
        """
        if self.orchestrator is None:
            documents: list[Document] = []
        else:
            documents = await self.orchestrator.list_documents_by_collection(collection_id)

        start = (page - 1) * page_size
        return DocumentListResponse(
            documents=documents[start : start + page_size],
            total=len(documents),
            page=page,
            page_size=page_size,
        )

    async def get_document(self, document_id: str) -> Document:
        """
        Get document by ID.

        Raises:
            NotFoundError: If the document does not exist
        """
        document = None
        if self.orchestrator is not None:
            document = await self.orchestrator.get_document(document_id)
        if document is None:
            raise NotFoundError("document not found", document_id)
        return document

    def _remove_original(self, document: Document) -> str | None:
        """Delete the stored original; returns the removed path, if any."""
        folder = self.storage_root / document.collection_id
        candidates: list[str] = []
        recorded = _extension_for(document.file_type)
        if recorded:
            candidates.append(recorded)
        candidates.extend(ext for ext in CLEANUP_EXTENSIONS if ext not in candidates)

        for ext in candidates:
            path = folder / f"{document.id}{ext}"
            try:
                path.unlink()
                return str(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(
                    "Failed to remove stored original",
                    extra={"document_id": document.id, "path": str(path), "error": str(e)},
                )
                return None
        return None

    async def delete_document(self, document_id: str) -> None:
        """
        Delete a document, its vectors and its stored original.

        Raises:
            NotFoundError: If the document does not exist
        """
        document = await self.get_document(document_id)

        await self.orchestrator.delete_document(document_id)
        removed = self._remove_original(document)

        if document.collection_id:
            await collection_crud.decrement_document_count(self.db, document.collection_id)
            await self.db.commit()

        logger.info(
            "Document deleted",
            extra={
                "document_id": document_id,
                "collection_id": document.collection_id,
                "original_removed": removed is not None,
            },
        )

    async def get_job(self, document_id: str) -> IngestionJobResponse:
        """
        Get the ingestion job created for a document upload.

        Raises:
            NotFoundError: If no job exists for the document
        """
        job = await job_crud.get_by_document_id(self.db, document_id)
        if job is None:
            raise NotFoundError("job not found", document_id)
        return IngestionJobResponse(
            id=job.id,
            document_id=job.document_id,
            collection_id=job.collection_id,
            status=job.status.value,
            result=job.result or {},
            created_at=job.created_at,
            updated_at=job.updated_at,
        )
