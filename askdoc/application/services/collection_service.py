"""
Collection service orchestrator.

Coordinates collection lifecycle operations.

Dependencies: askdoc.boundary.db.CRUD
System role: Collection use case orchestration
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.CRUD.collection_crud import collection_crud
from askdoc.boundary.db.models.collection_model import CollectionModel
from askdoc.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def collection_to_dict(collection: CollectionModel) -> dict[str, Any]:
    """Flatten a CollectionModel into the API field layout."""
    return {
        "id": collection.id,
        "name": collection.name,
        "description": collection.description or "",
        "metadata": collection.collection_metadata or {},
        "document_count": collection.document_count,
        "created_at": collection.created_at,
        "updated_at": collection.updated_at,
    }


class CollectionService:
    """Collection service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize collection service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def create_collection(
        self,
        name: str,
        description: str = "",
        metadata: dict | None = None,
    ) -> dict[str, Any]:
        """
        Create a collection with document_count 0.

        Args:
            name: Collection name
            description: Collection description
            metadata: Free-form metadata

        Returns:
            dict: Created collection
        """
        try:
            collection = await collection_crud.create(
                self.db,
                name=name,
                description=description or "",
                collection_metadata=metadata or {},
                document_count=0,
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to create collection", extra={"error": str(e), "collection_name": name})
            raise

        logger.info("Collection created", extra={"collection_id": collection.id, "collection_name": name})
        return collection_to_dict(collection)

    async def get_collection(self, collection_id: str) -> dict[str, Any]:
        """
        Get collection by ID.

        Raises:
            NotFoundError: If collection does not exist
        """
        collection = await collection_crud.get_by_id(self.db, collection_id)
        if collection is None:
            raise NotFoundError("collection not found", collection_id)
        return collection_to_dict(collection)

    async def list_collections(self) -> list[dict[str, Any]]:
        """List every collection, newest first."""
        collections = await collection_crud.list_ordered(self.db)
        return [collection_to_dict(c) for c in collections]

    async def update_collection(
        self,
        collection_id: str,
        name: str | None = None,
        description: str | None = None,
        metadata: dict | None = None,
    ) -> dict[str, Any]:
        """
        Update a collection, applying only non-empty fields.

        Args:
            collection_id: Collection ID
            name: New name (ignored when empty)
            description: New description (ignored when empty)
            metadata: Replacement metadata (ignored when None)

        Returns:
            dict: Updated collection

        Raises:
            NotFoundError: If collection does not exist
        """
        fields: dict[str, Any] = {}
        if name:
            fields["name"] = name
        if description:
            fields["description"] = description
        if metadata is not None:
            fields["collection_metadata"] = metadata

        if not fields:
            return await self.get_collection(collection_id)

        collection = await collection_crud.update_by_id(self.db, collection_id, **fields)
        if collection is None:
            raise NotFoundError("collection not found", collection_id)
        await self.db.commit()

        logger.info(
            "Collection updated",
            extra={"collection_id": collection_id, "fields": sorted(fields)},
        )
        return collection_to_dict(collection)

    async def delete_collection(self, collection_id: str) -> None:
        """
        Delete a collection row.

        Documents tagged with the collection are left in the orchestrator;
        callers remove them explicitly.

        Raises:
            NotFoundError: If collection does not exist
        """
        deleted = await collection_crud.delete_by_id(self.db, collection_id)
        if not deleted:
            raise NotFoundError("collection not found", collection_id)
        await self.db.commit()
        logger.info("Collection deleted", extra={"collection_id": collection_id})
