"""
RAG orchestrator boundary.

The Orchestrator interface and its LangChain/FAISS implementation.
"""

from askdoc.boundary.rag.langchain_orchestrator import LangChainOrchestrator
from askdoc.boundary.rag.orchestrator import ChatResult, IngestResult, Orchestrator

__all__ = ["ChatResult", "IngestResult", "LangChainOrchestrator", "Orchestrator"]
