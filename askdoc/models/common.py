"""
Shared API response schemas.

Dependencies: pydantic
System role: Generic message, error, stats and health payloads
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Acknowledgement body, e.g. {"message": "site deleted"}."""

    message: str


class ErrorResponse(BaseModel):
    """Error body used by every 4xx/5xx response."""

    error: str


class StatsResponse(BaseModel):
    """Aggregate counts for the admin dashboard."""

    total_documents: int = 0
    total_collections: int = 0
    total_sites: int = 0
    total_chats: int = 0


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
