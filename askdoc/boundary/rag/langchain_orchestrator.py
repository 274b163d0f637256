"""
LangChain RAG orchestrator.

Implements the Orchestrator interface with LangChain loaders and splitter,
a local FAISS index, and OpenAI-compatible chat and embedding models
(Ollama by default).

Dependencies: langchain_openai, langchain_community, askdoc.boundary.rag
System role: RAG backend (ingestion, retrieval, generation)
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi.concurrency import run_in_threadpool
from langchain_core.documents import Document as LCDocument
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from askdoc.boundary.rag.document_registry import DocumentRegistry
from askdoc.boundary.rag.loaders import Chunker, load_documents
from askdoc.boundary.rag.orchestrator import ChatResult, IngestResult, Orchestrator
from askdoc.boundary.rag.prompt import RAG_PROMPT, format_context
from askdoc.boundary.rag.vector_index import FAISSIndex
from askdoc.configs.rag import LLMSettings, RAGSettings
from askdoc.core.exceptions import UpstreamError
from askdoc.models.chat import Source
from askdoc.models.document import (
    META_COLLECTION_ID,
    META_FILE_TYPE,
    META_FILENAME,
    Document,
)
from askdoc.models.streaming import StreamChunk, StreamChunkType

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200


def _content_text(content: Any) -> str:
    """Flatten model chunk content (str or list of parts) into text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content or "")


def build_models(llm: LLMSettings) -> tuple[BaseChatModel, Embeddings]:
    """
    Create chat and embedding clients for an OpenAI-compatible endpoint.

    Args:
        llm: LLM settings section

    Returns:
        tuple: (chat model, embeddings)
    """
    api_key = llm.api_key or "not-needed"
    chat_model = ChatOpenAI(
        model=llm.llm_model,
        base_url=llm.base_url,
        api_key=api_key,
        temperature=llm.temperature,
    )
    embeddings = OpenAIEmbeddings(
        model=llm.embedding_model,
        base_url=llm.base_url,
        api_key=api_key,
        check_embedding_ctx_length=False,
    )
    return chat_model, embeddings


class LangChainOrchestrator(Orchestrator):
    """
    RAG backend built from LangChain components.

    Documents are registered in a DocumentRegistry; their chunks live in a
    FAISSIndex tagged with document_id, collection_id and filename so chat
    retrieval can be restricted to a site's collections. Index mutations are
    serialized with an asyncio lock and run in the threadpool.
    """

    def __init__(
        self,
        registry: DocumentRegistry,
        index: FAISSIndex,
        chat_model: BaseChatModel,
        chunker: Chunker,
        top_k: int = 5,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            registry: Document registry (separate database)
            index: FAISS index wrapper
            chat_model: LangChain chat model used for answers
            chunker: Text splitter wrapper
            top_k: Chunks retrieved per question
        """
        self._registry = registry
        self._index = index
        self._chat_model = chat_model
        self._chunker = chunker
        self._top_k = top_k
        self._index_lock = asyncio.Lock()

    @classmethod
    async def create(
        cls,
        rag: RAGSettings,
        llm: LLMSettings,
        chat_model: BaseChatModel | None = None,
        embeddings: Embeddings | None = None,
    ) -> "LangChainOrchestrator":
        """
        Build an orchestrator from settings.

        Args:
            rag: RAG settings section
            llm: LLM settings section
            chat_model: Override for the chat model (tests inject fakes)
            embeddings: Override for the embeddings model

        Returns:
            LangChainOrchestrator: Ready-to-use instance
        """
        if chat_model is None or embeddings is None:
            default_chat, default_embeddings = build_models(llm)
            chat_model = chat_model or default_chat
            embeddings = embeddings or default_embeddings

        registry = DocumentRegistry(rag.db_path)
        await registry.initialize()
        index = await run_in_threadpool(FAISSIndex, embeddings, rag.index_dir, rag.index_type)

        logger.info(
            "Orchestrator initialized",
            extra={
                "provider": llm.provider,
                "llm_model": llm.llm_model,
                "embedding_model": llm.embedding_model,
                "index_type": rag.index_type,
            },
        )
        return cls(
            registry=registry,
            index=index,
            chat_model=chat_model,
            chunker=Chunker(rag.chunk_size, rag.chunk_overlap),
            top_k=rag.top_k,
        )

    # Documents

    async def register_document(self, document_id: str, metadata: dict[str, Any]) -> Document:
        return await self._registry.create(document_id, metadata)

    async def ingest_file(self, path: str, document_id: str, metadata: dict[str, Any]) -> IngestResult:
        file_type = str(metadata.get(META_FILE_TYPE) or "")
        pages = await run_in_threadpool(load_documents, path, file_type)
        chunks: list[LCDocument] = self._chunker.chunk(pages)

        for i, chunk in enumerate(chunks):
            chunk.metadata.update(
                {
                    "document_id": document_id,
                    "collection_id": metadata.get(META_COLLECTION_ID, ""),
                    "filename": metadata.get(META_FILENAME, ""),
                    "chunk_index": i,
                }
            )
        ids = [f"{document_id}:{i}" for i in range(len(chunks))]

        try:
            async with self._index_lock:
                added = await run_in_threadpool(self._index.add_chunks, chunks, ids)
        except Exception as e:
            raise UpstreamError(f"indexing failed: {e}", resource_id=document_id) from e

        logger.info(
            "Document indexed",
            extra={"document_id": document_id, "pages": len(pages), "chunks": added},
        )
        return IngestResult(document_id=document_id, chunk_count=added)

    async def update_document_metadata(self, document_id: str, updates: dict[str, Any]) -> Document | None:
        return await self._registry.merge_metadata(document_id, updates)

    async def get_document(self, document_id: str) -> Document | None:
        return await self._registry.get(document_id)

    async def list_documents(self) -> list[Document]:
        return await self._registry.list_documents()

    async def list_documents_by_collection(self, collection_id: str) -> list[Document]:
        return await self._registry.list_documents(collection_id)

    async def delete_document(self, document_id: str) -> bool:
        async with self._index_lock:
            removed = await run_in_threadpool(self._index.delete_document, document_id)
        deleted = await self._registry.delete(document_id)
        logger.info(
            "Document deleted from orchestrator",
            extra={"document_id": document_id, "chunks_removed": removed, "found": deleted},
        )
        return deleted

    # Retrieval and generation

    async def _retrieve(self, query: str, top_k: int, collection_ids: list[str] | None) -> list[tuple[LCDocument, float]]:
        async with self._index_lock:
            return await run_in_threadpool(self._index.similarity_search, query, top_k, collection_ids)

    @staticmethod
    def _to_sources(results: list[tuple[LCDocument, float]]) -> list[Source]:
        return [
            Source(
                document_id=str(doc.metadata.get("document_id", "")),
                filename=str(doc.metadata.get("filename", "")),
                content=doc.page_content[:EXCERPT_LENGTH],
                score=float(score),
            )
            for doc, score in results
        ]

    def _build_messages(self, question: str, results: list[tuple[LCDocument, float]]):
        context = format_context([doc for doc, _ in results])
        return RAG_PROMPT.invoke({"context": context, "question": question}).to_messages()

    async def search(self, query: str, top_k: int, collection_ids: list[str] | None = None) -> list[Source]:
        results = await self._retrieve(query, top_k, collection_ids)
        return self._to_sources(results)

    async def chat(self, message: str, collection_ids: list[str]) -> ChatResult:
        try:
            results = await self._retrieve(message, self._top_k, collection_ids)
            response = await self._chat_model.ainvoke(self._build_messages(message, results))
        except Exception as e:
            logger.error(
                "Chat generation failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise UpstreamError(str(e)) from e

        return ChatResult(answer=_content_text(response.content), sources=self._to_sources(results))

    async def chat_stream(self, message: str, collection_ids: list[str]) -> AsyncIterator[StreamChunk]:
        yield StreamChunk.thinking("Searching documents...")

        try:
            results = await self._retrieve(message, self._top_k, collection_ids)
        except Exception as e:
            logger.error("Retrieval failed", extra={"error": str(e)})
            yield StreamChunk.error(f"retrieval failed: {e}")
            return

        yield StreamChunk.thinking(f"Found {len(results)} relevant passages")

        token_count = 0
        try:
            async for chunk in self._chat_model.astream(self._build_messages(message, results)):
                text = _content_text(chunk.content)
                if text:
                    token_count += 1
                    yield StreamChunk.text(text)
        except Exception as e:
            logger.error(
                "Chat stream failed",
                extra={"error": str(e), "tokens_streamed": token_count},
            )
            yield StreamChunk.error(str(e))
            return

        yield StreamChunk(type=StreamChunkType.SOURCES, sources=self._to_sources(results))
        yield StreamChunk.done()

    async def close(self) -> None:
        await self._registry.close()
