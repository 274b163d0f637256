"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory metadata database, a scriptable in-memory orchestrator,
settings pointed at temp directories, and an app client with lifespan
Dependencies: pytest, sqlalchemy, fastapi
System role: Test infrastructure and fixture management
"""

from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from askdoc.boundary.db import create_tables, get_async_engine, get_async_session_factory
from askdoc.boundary.rag.orchestrator import ChatResult, IngestResult, Orchestrator
from askdoc.configs import Settings
from askdoc.configs.database import DatabaseSettings, StorageSettings
from askdoc.configs.rag import RAGSettings
from askdoc.configs.server import AdminSettings, ServerSettings
from askdoc.core.exceptions import UpstreamError
from askdoc.main import create_app
from askdoc.models.chat import Source
from askdoc.models.document import META_COLLECTION_ID, Document
from askdoc.models.streaming import StreamChunk


class FakeOrchestrator(Orchestrator):
    """
    In-memory orchestrator for service and API tests.

    Documents live in a dict; chat answers and stream chunks are scripted
    through attributes.
    """

    def __init__(self) -> None:
        self.documents: dict[str, tuple[dict[str, Any], datetime]] = {}
        self.ingested: list[tuple[str, str, dict[str, Any]]] = []
        self.deleted: list[str] = []
        self.chat_calls: list[tuple[str, list[str]]] = []
        self.answer = "The answer."
        self.sources = [Source(document_id="doc-1", filename="guide.md", content="excerpt", score=0.5)]
        self.stream_chunks: list[StreamChunk] | None = None
        self.stream_error: Exception | None = None
        self.chat_error: Exception | None = None
        self.ingest_error: Exception | None = None
        self.list_error: Exception | None = None
        self.chunk_count = 3
        self.closed = False

    def _document(self, document_id: str) -> Document | None:
        entry = self.documents.get(document_id)
        if entry is None:
            return None
        metadata, created_at = entry
        return Document.from_metadata(document_id, metadata, created_at=created_at, updated_at=created_at)

    async def register_document(self, document_id: str, metadata: dict[str, Any]) -> Document:
        self.documents[document_id] = (dict(metadata), datetime.now(timezone.utc))
        return self._document(document_id)

    async def ingest_file(self, path: str, document_id: str, metadata: dict[str, Any]) -> IngestResult:
        self.ingested.append((path, document_id, dict(metadata)))
        if self.ingest_error is not None:
            raise self.ingest_error
        return IngestResult(document_id=document_id, chunk_count=self.chunk_count)

    async def update_document_metadata(self, document_id: str, updates: dict[str, Any]) -> Document | None:
        if document_id not in self.documents:
            return None
        metadata, created_at = self.documents[document_id]
        for key, value in updates.items():
            if value is None:
                metadata.pop(key, None)
            else:
                metadata[key] = value
        return self._document(document_id)

    async def get_document(self, document_id: str) -> Document | None:
        return self._document(document_id)

    async def list_documents(self) -> list[Document]:
        if self.list_error is not None:
            raise self.list_error
        ordered = sorted(self.documents, key=lambda d: self.documents[d][1], reverse=True)
        return [self._document(d) for d in ordered]

    async def list_documents_by_collection(self, collection_id: str) -> list[Document]:
        return [
            d for d in await self.list_documents() if d.collection_id == collection_id
        ]

    async def delete_document(self, document_id: str) -> bool:
        self.deleted.append(document_id)
        return self.documents.pop(document_id, None) is not None

    async def search(self, query: str, top_k: int, collection_ids: list[str] | None = None) -> list[Source]:
        return self.sources[:top_k]

    async def chat(self, message: str, collection_ids: list[str]) -> ChatResult:
        self.chat_calls.append((message, list(collection_ids)))
        if self.chat_error is not None:
            raise self.chat_error
        return ChatResult(answer=self.answer, sources=list(self.sources))

    async def chat_stream(self, message: str, collection_ids: list[str]) -> AsyncIterator[StreamChunk]:
        self.chat_calls.append((message, list(collection_ids)))
        chunks = self.stream_chunks
        if chunks is None:
            chunks = [
                StreamChunk.thinking("Searching documents..."),
                StreamChunk.text("The "),
                StreamChunk.text("answer."),
                StreamChunk(type="sources", sources=list(self.sources)),
                StreamChunk.done(),
            ]
        for chunk in chunks:
            yield chunk
        if self.stream_error is not None:
            raise self.stream_error

    async def close(self) -> None:
        self.closed = True


def collection_metadata(collection_id: str, **extra: Any) -> dict[str, Any]:
    """Minimal document metadata bag for a collection."""
    return {META_COLLECTION_ID: collection_id, "filename": "doc.md", "file_type": "md", **extra}


@pytest.fixture
def fake_orchestrator() -> FakeOrchestrator:
    """Provide a fresh scriptable orchestrator."""
    return FakeOrchestrator()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """
    Settings with a temp-file metadata database and temp storage.

    A file database gives each session its own connection, so background
    ingestion tasks and request sessions do not share a transaction.

    Returns:
        Settings: Application settings isolated per test
    """
    return Settings(
        server=ServerSettings(base_url="http://askdoc.test", allow_origins=["*"]),
        admin=AdminSettings(api_key=""),
        database=DatabaseSettings(path=str(tmp_path / "askdoc.db")),
        storage=StorageSettings(documents=str(tmp_path / "documents")),
        rag=RAGSettings(db_path=str(tmp_path / "rag.db"), index_dir=str(tmp_path / "index")),
    )


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database with FK enforcement.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema
    """
    engine = get_async_engine(DatabaseSettings(path=":memory:"))
    await create_tables(engine)
    yield get_async_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def test_async_db(session_factory):
    """
    Provide a single session on the in-memory database.

    Yields:
        AsyncSession: Test database session with rollback on teardown
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


def make_client(settings: Settings, orchestrator: Orchestrator | None) -> TestClient:
    """Build an app whose lifespan installs the given orchestrator."""

    async def factory(_: Settings) -> Orchestrator:
        if orchestrator is None:
            raise UpstreamError("orchestrator unavailable")
        return orchestrator

    return TestClient(create_app(settings, orchestrator_factory=factory))


@pytest.fixture
def client(test_settings, fake_orchestrator):
    """
    App client with lifespan running and the fake orchestrator installed.

    Yields:
        TestClient: Client against a fully wired application
    """
    with make_client(test_settings, fake_orchestrator) as test_client:
        yield test_client


@pytest.fixture
def degraded_client(test_settings):
    """App client whose orchestrator failed to start."""
    with make_client(test_settings, None) as test_client:
        yield test_client
