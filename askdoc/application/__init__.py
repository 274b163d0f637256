"""Application layer: use case services and the background ingestion queue."""
