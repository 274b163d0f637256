"""
Widget chat schemas.

Dependencies: pydantic
System role: Chat request/response validation
"""

from pydantic import BaseModel, Field

from askdoc.models.site import WidgetConfig


class Source(BaseModel):
    """
    Citation returned alongside an answer.

    Attributes:
        document_id: Cited document
        filename: Cited document's original filename
        content: Excerpt of the retrieved chunk
        score: Retrieval relevance score
    """

    document_id: str
    filename: str = ""
    content: str = ""
    score: float = 0.0


class ChatRequest(BaseModel):
    """
    Request body for the widget chat endpoints.

    Attributes:
        session_id: Existing session to continue; omitted starts a new one
        message: User's message
    """

    session_id: str | None = None
    message: str = Field(..., min_length=1, max_length=10000)


class ChatResponse(BaseModel):
    """Single JSON chat turn."""

    session_id: str
    answer: str
    sources: list[Source] = Field(default_factory=list)


class WidgetConfigResponse(BaseModel):
    """Public widget configuration for a site."""

    site_id: str
    name: str
    config: WidgetConfig
    base_url: str
