"""
Local FAISS vector index.

Wraps the LangChain FAISS vector store over a flat or HNSW faiss index,
persisted on disk, with per-document deletion and collection filtering.

Dependencies: faiss, numpy, langchain_community.vectorstores
System role: Chunk embedding storage and similarity search
"""

import logging
from pathlib import Path

import faiss
import numpy as np
from langchain_community.docstore.in_memory import InMemoryDocstore
from langchain_community.vectorstores import FAISS
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)

HNSW_NEIGHBORS = 32


class FAISSIndex:
    """
    FAISS index keyed by chunk id, tagged with document_id and collection_id.

    All methods are blocking; callers run them in a threadpool and serialize
    writes themselves.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        persist_directory: str,
        index_type: str = "hnsw",
    ) -> None:
        """
        Initialize index and load any persisted state.

        Args:
            embeddings: LangChain embeddings model
            persist_directory: Directory for index.faiss / index.pkl
            index_type: 'flat' (exact L2) or 'hnsw' (approximate)
        """
        self._embeddings = embeddings
        self._persist_dir = Path(persist_directory)
        self._persist_dir.mkdir(parents=True, exist_ok=True)
        self._index_type = index_type
        self._store: FAISS | None = None
        self._load()

    def _load(self) -> None:
        """Load existing index if one was saved."""
        if (self._persist_dir / "index.faiss").exists():
            self._store = FAISS.load_local(
                str(self._persist_dir),
                self._embeddings,
                allow_dangerous_deserialization=True,
            )
            logger.info(
                "Loaded FAISS index",
                extra={"path": str(self._persist_dir), "vectors": self.size},
            )

    def _new_faiss_index(self, dimension: int) -> faiss.Index:
        if self._index_type == "hnsw":
            return faiss.IndexHNSWFlat(dimension, HNSW_NEIGHBORS)
        return faiss.IndexFlatL2(dimension)

    def _new_store(self, index: faiss.Index, docstore: dict[str, Document], mapping: dict[int, str]) -> FAISS:
        return FAISS(
            embedding_function=self._embeddings,
            index=index,
            docstore=InMemoryDocstore(docstore),
            index_to_docstore_id=mapping,
        )

    def _save(self) -> None:
        if self._store is not None:
            self._store.save_local(str(self._persist_dir))

    @property
    def size(self) -> int:
        """Number of vectors currently indexed."""
        return 0 if self._store is None else self._store.index.ntotal

    def add_chunks(self, chunks: list[Document], ids: list[str]) -> int:
        """
        Embed and add chunks, then persist.

        Args:
            chunks: Chunk Documents carrying document_id/collection_id metadata
            ids: One unique id per chunk

        Returns:
            int: Number of chunks added
        """
        if not chunks:
            return 0

        texts = [chunk.page_content for chunk in chunks]
        vectors = self._embeddings.embed_documents(texts)

        if self._store is None:
            self._store = self._new_store(self._new_faiss_index(len(vectors[0])), {}, {})

        self._store.add_embeddings(
            list(zip(texts, vectors)),
            metadatas=[chunk.metadata for chunk in chunks],
            ids=ids,
        )
        self._save()
        return len(chunks)

    def similarity_search(
        self,
        query: str,
        k: int = 5,
        collection_ids: list[str] | None = None,
    ) -> list[tuple[Document, float]]:
        """
        Search for chunks similar to a query.

        Args:
            query: Search query text
            k: Number of results to return
            collection_ids: Restrict to chunks from these collections (None = all)

        Returns:
            list[tuple[Document, float]]: Chunks with L2 distance (lower is closer)
        """
        if self._store is None or self.size == 0:
            return []

        search_filter = None
        if collection_ids is not None:
            allowed = set(collection_ids)
            if not allowed:
                return []
            search_filter = lambda metadata: metadata.get("collection_id") in allowed  # noqa: E731

        return self._store.similarity_search_with_score(
            query,
            k=k,
            filter=search_filter,
            fetch_k=max(k * 10, 50),
        )

    def delete_document(self, document_id: str) -> int:
        """
        Remove every chunk of a document, rebuilding the faiss index.

        HNSW indexes cannot remove vectors in place, so both index kinds are
        rebuilt from the reconstructed vectors that remain.

        Args:
            document_id: Document whose chunks should be removed

        Returns:
            int: Number of chunks removed
        """
        if self._store is None:
            return 0

        docstore = self._store.docstore._dict
        keep: list[tuple[int, str]] = []
        removed = 0
        for position, chunk_id in sorted(self._store.index_to_docstore_id.items()):
            doc = docstore.get(chunk_id)
            if doc is not None and doc.metadata.get("document_id") == document_id:
                removed += 1
            else:
                keep.append((position, chunk_id))

        if removed == 0:
            return 0

        index = self._new_faiss_index(self._store.index.d)
        if keep:
            vectors = np.vstack([self._store.index.reconstruct(position) for position, _ in keep])
            index.add(vectors.astype("float32"))

        self._store = self._new_store(
            index,
            {chunk_id: docstore[chunk_id] for _, chunk_id in keep if chunk_id in docstore},
            {new_pos: chunk_id for new_pos, (_, chunk_id) in enumerate(keep)},
        )
        self._save()
        logger.info(
            "Removed document vectors",
            extra={"document_id": document_id, "removed": removed, "remaining": len(keep)},
        )
        return removed
