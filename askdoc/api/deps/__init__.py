"""API-specific dependencies."""

from .dependencies import (
    get_chat_service,
    get_collection_service,
    get_ingest_service,
    get_orchestrator,
    get_settings_dependency,
    get_site_service,
    get_stats_service,
    get_widget_service,
)

__all__ = [
    "get_chat_service",
    "get_collection_service",
    "get_ingest_service",
    "get_orchestrator",
    "get_settings_dependency",
    "get_site_service",
    "get_stats_service",
    "get_widget_service",
]
