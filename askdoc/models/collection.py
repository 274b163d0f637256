"""
Collection API schemas.

Dependencies: pydantic
System role: Collection request/response validation
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class CreateCollectionRequest(BaseModel):
    """Request body for POST /api/admin/collections."""

    name: str = Field(..., min_length=1, max_length=255, description="Collection name")
    description: str = Field(default="", description="Optional description")
    metadata: dict[str, Any] | None = Field(default=None, description="Free-form metadata")


class UpdateCollectionRequest(BaseModel):
    """
    Request body for PUT /api/admin/collections/{id}.

    Empty or omitted fields leave the stored value unchanged.
    """

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    metadata: dict[str, Any] | None = None


class CollectionResponse(BaseModel):
    """Collection as returned by the admin API."""

    id: str
    name: str
    description: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)
    document_count: int = 0
    created_at: datetime
    updated_at: datetime


class CollectionListResponse(BaseModel):
    """Wrapper for GET /api/admin/collections."""

    collections: list[CollectionResponse]
