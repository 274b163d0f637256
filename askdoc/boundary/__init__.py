"""External boundaries: metadata database and RAG orchestrator."""
