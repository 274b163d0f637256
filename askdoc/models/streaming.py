"""
Streaming chunk schemas for SSE chat.

Defines chunk types and the SSE frame encoding shared by the chat relay
and the widget.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel

from askdoc.models.chat import Source


class StreamChunkType(str, Enum):
    """Server-to-client chunk types for streaming chat."""

    THINKING = "thinking"
    CONTENT = "content"
    SOURCES = "sources"
    ERROR = "error"
    DONE = "done"


TERMINAL_CHUNK_TYPES = frozenset({StreamChunkType.DONE})


class StreamChunk(BaseModel):
    """
    One unit of a streamed chat answer.

    Attributes:
        type: Chunk type; the SSE event name always equals this value
        content: Progress text (thinking), answer fragment (content) or error text
        sources: Citation list, only on the sources chunk
        session_id: Chat session id, only on the done chunk
    """

    type: StreamChunkType
    content: str | None = None
    sources: list[Source] | None = None
    session_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary without empty fields."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_sse(self) -> str:
        """Encode as one SSE frame: event line, data line, blank line."""
        return f"event: {self.type.value}\ndata: {json.dumps(self.to_dict())}\n\n"

    @classmethod
    def thinking(cls, text: str) -> "StreamChunk":
        return cls(type=StreamChunkType.THINKING, content=text)

    @classmethod
    def text(cls, text: str) -> "StreamChunk":
        return cls(type=StreamChunkType.CONTENT, content=text)

    @classmethod
    def error(cls, text: str) -> "StreamChunk":
        return cls(type=StreamChunkType.ERROR, content=text)

    @classmethod
    def done(cls, session_id: str | None = None) -> "StreamChunk":
        return cls(type=StreamChunkType.DONE, session_id=session_id)
