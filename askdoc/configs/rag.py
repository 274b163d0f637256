"""
Retrieval and model provider configuration settings.

Covers the document registry database, FAISS index kind and location,
chunking parameters, and the OpenAI-compatible LLM endpoint.

Dependencies: pydantic, pydantic_settings
System role: Vector store and LLM configuration for the orchestrator
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from askdoc.configs.base import env_config


class RAGSettings(BaseSettings):
    """Vector index and chunking configuration."""

    model_config = env_config("rag")

    db_path: str = Field(default="./data/rag.db", description="Document registry SQLite file")
    index_dir: str = Field(default="./data/faiss_index", description="FAISS index directory")
    index_type: str = Field(default="hnsw", description="FAISS index kind: 'flat' or 'hnsw'")
    chunk_size: int = Field(default=1000, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=200, description="Overlap between consecutive chunks")
    top_k: int = Field(default=5, description="Chunks retrieved per question")

    @field_validator("index_type")
    @classmethod
    def _check_index_type(cls, value: str) -> str:
        value = value.lower()
        if value not in ("flat", "hnsw"):
            raise ValueError(f"index_type must be 'flat' or 'hnsw', got {value!r}")
        return value


class LLMSettings(BaseSettings):
    """OpenAI-compatible chat and embedding endpoint."""

    model_config = env_config("llm")

    provider: str = Field(default="ollama", description="Provider label (informational)")
    base_url: str = Field(default="http://localhost:11434/v1", description="OpenAI-compatible base URL")
    api_key: str = Field(default="", description="Provider API key; Ollama ignores it")
    embedding_model: str = Field(default="nomic-embed-text", description="Embedding model name")
    llm_model: str = Field(default="qwen2.5:7b", description="Chat model name")
    temperature: float = Field(default=0.0, description="Sampling temperature")
