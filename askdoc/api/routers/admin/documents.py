"""
Document admin endpoints.

Routes:
- POST /collections/{id}/documents - Upload document (non-blocking ingestion)
- GET /collections/{id}/documents - Paginated document list
- GET /documents/{id} - Get document
- DELETE /documents/{id} - Delete document, vectors and stored original
- GET /documents/{id}/job - Ingestion job status for polling

Dependencies: askdoc.application.services, askdoc.models
System role: Document management HTTP API
"""

import json
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from askdoc.api.deps.dependencies import get_ingest_service
from askdoc.api.routers.error_handling import handle_api_errors
from askdoc.application.services.ingest_service import IngestService
from askdoc.models.common import MessageResponse
from askdoc.models.document import Document, DocumentListResponse, IngestionJobResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _parse_metadata(raw: str | None) -> dict:
    """Decode the optional metadata form field (a JSON object string)."""
    if not raw:
        return {}
    try:
        metadata = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="invalid metadata JSON")
    if not isinstance(metadata, dict):
        raise HTTPException(status_code=400, detail="invalid metadata JSON")
    return metadata


@router.post("/collections/{collection_id}/documents", response_model=Document, status_code=201)
@handle_api_errors
async def upload_document(
    collection_id: str,
    file: UploadFile | None = File(None),
    metadata: str | None = Form(None),
    ingest_service: IngestService = Depends(get_ingest_service),
) -> Document:
    """
    Upload a document via multipart form (non-blocking).

    The file is stored and registered immediately; parsing and indexing
    run in the background. Poll GET /documents/{id} or /documents/{id}/job.

    Args:
        collection_id: Target collection
        file: Uploaded file (multipart field "file")
        metadata: Optional JSON object string of extra metadata
        ingest_service: Injected IngestService

    Returns:
        Document: Registered document with status pending

    Raises:
        HTTPException(400): Invalid metadata, missing file or unsupported type
        HTTPException(404): Collection not found
    """
    extra = _parse_metadata(metadata)
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="file is required")

    logger.info(
        "Document upload request received",
        extra={"collection_id": collection_id, "document_name": file.filename},
    )

    content = await file.read()
    return await ingest_service.upload_document(
        collection_id=collection_id,
        filename=file.filename,
        content=content,
        metadata=extra,
    )


@router.get("/collections/{collection_id}/documents", response_model=DocumentListResponse)
@handle_api_errors
async def list_documents(
    collection_id: str,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    ingest_service: IngestService = Depends(get_ingest_service),
) -> DocumentListResponse:
    """
    List a collection's documents, newest first.

    page below 1 reads as 1; page_size outside 1..100 reads as 20.
    """
    if page < 1:
        page = 1
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return await ingest_service.list_documents(collection_id, page, page_size)


@router.get("/documents/{document_id}", response_model=Document)
@handle_api_errors
async def get_document(
    document_id: str,
    ingest_service: IngestService = Depends(get_ingest_service),
) -> Document:
    """Get a document."""
    return await ingest_service.get_document(document_id)


@router.delete("/documents/{document_id}", response_model=MessageResponse)
@handle_api_errors
async def delete_document(
    document_id: str,
    ingest_service: IngestService = Depends(get_ingest_service),
) -> MessageResponse:
    """
    Delete a document with its vectors and stored original.

    Raises:
        HTTPException(404): Document not found
    """
    await ingest_service.delete_document(document_id)
    return MessageResponse(message="document deleted")


@router.get("/documents/{document_id}/job", response_model=IngestionJobResponse)
@handle_api_errors
async def get_ingestion_job(
    document_id: str,
    ingest_service: IngestService = Depends(get_ingest_service),
) -> IngestionJobResponse:
    """
    Get the ingestion job for a document.

    Raises:
        HTTPException(404): No job recorded for the document
    """
    return await ingest_service.get_job(document_id)
