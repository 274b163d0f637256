"""Application services."""

from askdoc.application.services.chat_service import ChatService, ChatTurn
from askdoc.application.services.collection_service import CollectionService
from askdoc.application.services.ingest_service import IngestService
from askdoc.application.services.site_service import SiteService
from askdoc.application.services.stats_service import StatsService
from askdoc.application.services.widget_service import WidgetService

__all__ = [
    "ChatService",
    "ChatTurn",
    "CollectionService",
    "IngestService",
    "SiteService",
    "StatsService",
    "WidgetService",
]
