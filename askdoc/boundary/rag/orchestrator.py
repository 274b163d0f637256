"""
Orchestrator interface.

The narrow surface through which the application talks to the RAG
backend: document ingestion and registry, retrieval, and chat.

Dependencies: askdoc.models
System role: Contract between services and the RAG implementation
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from askdoc.models.chat import Source
from askdoc.models.document import Document
from askdoc.models.streaming import StreamChunk


@dataclass
class IngestResult:
    """Outcome of indexing one file."""

    document_id: str
    chunk_count: int


@dataclass
class ChatResult:
    """Answer to a single chat turn."""

    answer: str
    sources: list[Source] = field(default_factory=list)


class Orchestrator(ABC):
    """RAG backend used by the ingestion workflow and the chat relay."""

    @abstractmethod
    async def register_document(self, document_id: str, metadata: dict[str, Any]) -> Document:
        """Create the document record before its content is indexed."""

    @abstractmethod
    async def ingest_file(self, path: str, document_id: str, metadata: dict[str, Any]) -> IngestResult:
        """
        Load, chunk, embed and index a stored file.

        Args:
            path: Saved original on disk
            document_id: Registered document id
            metadata: Metadata bag; must include collection_id, filename, file_type

        Returns:
            IngestResult: Number of chunks indexed

        Raises:
            UpstreamError: When loading, embedding or indexing fails
        """

    @abstractmethod
    async def update_document_metadata(self, document_id: str, updates: dict[str, Any]) -> Document | None:
        """Merge keys into a document's metadata; None if the document is unknown."""

    @abstractmethod
    async def get_document(self, document_id: str) -> Document | None:
        """Return one document or None."""

    @abstractmethod
    async def list_documents(self) -> list[Document]:
        """Return every document."""

    @abstractmethod
    async def list_documents_by_collection(self, collection_id: str) -> list[Document]:
        """Return the documents tagged with a collection id."""

    @abstractmethod
    async def delete_document(self, document_id: str) -> bool:
        """Remove a document and its vectors; False if unknown."""

    @abstractmethod
    async def search(self, query: str, top_k: int, collection_ids: list[str] | None = None) -> list[Source]:
        """Return the top_k most relevant chunks as sources."""

    @abstractmethod
    async def chat(self, message: str, collection_ids: list[str]) -> ChatResult:
        """
        Answer a message from the given collections.

        Raises:
            UpstreamError: When retrieval or generation fails
        """

    @abstractmethod
    def chat_stream(self, message: str, collection_ids: list[str]) -> AsyncIterator[StreamChunk]:
        """
        Stream an answer as thinking/content/sources chunks.

        Implementations report failures as an error chunk. The stream may
        or may not end with a done chunk; the chat relay guarantees one.
        """

    async def close(self) -> None:
        """Release resources held by the backend."""
        return None
