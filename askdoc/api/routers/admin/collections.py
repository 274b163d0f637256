"""
Collection admin endpoints.

Routes:
- POST /collections - Create collection
- GET /collections - List collections
- GET /collections/{id} - Get collection
- PUT /collections/{id} - Update collection (non-empty fields only)
- DELETE /collections/{id} - Delete collection

Dependencies: askdoc.application.services, askdoc.models
System role: Collection management HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from askdoc.api.deps.dependencies import get_collection_service
from askdoc.api.routers.error_handling import handle_api_errors
from askdoc.application.services.collection_service import CollectionService
from askdoc.models.collection import (
    CollectionListResponse,
    CollectionResponse,
    CreateCollectionRequest,
    UpdateCollectionRequest,
)
from askdoc.models.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/collections", tags=["collections"])


@router.post("", response_model=CollectionResponse, status_code=201)
@handle_api_errors
async def create_collection(
    request: CreateCollectionRequest,
    collection_service: CollectionService = Depends(get_collection_service),
) -> CollectionResponse:
    """
    Create a collection.

    Args:
        request: CreateCollectionRequest with name, description, metadata
        collection_service: Injected CollectionService

    Returns:
        CollectionResponse: Created collection
    """
    collection = await collection_service.create_collection(
        name=request.name,
        description=request.description,
        metadata=request.metadata,
    )
    return CollectionResponse(**collection)


@router.get("", response_model=CollectionListResponse)
@handle_api_errors
async def list_collections(
    collection_service: CollectionService = Depends(get_collection_service),
) -> CollectionListResponse:
    """List all collections, newest first."""
    collections = await collection_service.list_collections()
    return CollectionListResponse(collections=[CollectionResponse(**c) for c in collections])


@router.get("/{collection_id}", response_model=CollectionResponse)
@handle_api_errors
async def get_collection(
    collection_id: str,
    collection_service: CollectionService = Depends(get_collection_service),
) -> CollectionResponse:
    """
    Get a collection.

    Raises:
        HTTPException(404): Collection not found
    """
    return CollectionResponse(**await collection_service.get_collection(collection_id))


@router.put("/{collection_id}", response_model=CollectionResponse)
@handle_api_errors
async def update_collection(
    collection_id: str,
    request: UpdateCollectionRequest,
    collection_service: CollectionService = Depends(get_collection_service),
) -> CollectionResponse:
    """
    Update a collection; empty fields keep their current value.

    Raises:
        HTTPException(404): Collection not found
    """
    collection = await collection_service.update_collection(
        collection_id,
        name=request.name,
        description=request.description,
        metadata=request.metadata,
    )
    return CollectionResponse(**collection)


@router.delete("/{collection_id}", response_model=MessageResponse)
@handle_api_errors
async def delete_collection(
    collection_id: str,
    collection_service: CollectionService = Depends(get_collection_service),
) -> MessageResponse:
    """
    Delete a collection.

    Raises:
        HTTPException(404): Collection not found
    """
    await collection_service.delete_collection(collection_id)
    return MessageResponse(message="collection deleted")
