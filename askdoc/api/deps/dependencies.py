"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived components
(settings, orchestrator, ingestion queue, session factory) are created in
the application lifespan and read from app.state.

Dependencies: askdoc.configs, askdoc.application, askdoc.boundary
System role: DI container for service injection
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.application.ingestion_queue import IngestionQueue
from askdoc.application.services import (
    ChatService,
    CollectionService,
    IngestService,
    SiteService,
    StatsService,
    WidgetService,
)
from askdoc.boundary.db import get_async_db
from askdoc.boundary.rag.orchestrator import Orchestrator
from askdoc.configs import Settings


def get_settings_dependency(request: Request) -> Settings:
    """
    Get the settings the application was created with.

    Returns:
        Settings: Application settings
    """
    return request.app.state.settings


def get_orchestrator(request: Request) -> Orchestrator | None:
    """
    Get the RAG orchestrator.

    Returns:
        Orchestrator | None: None when startup could not build one
    """
    return request.app.state.orchestrator


def get_ingestion_queue(request: Request) -> IngestionQueue:
    """Get the background ingestion queue."""
    return request.app.state.ingestion_queue


def get_collection_service(db: AsyncSession = Depends(get_async_db)) -> CollectionService:
    """
    Get collection service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        CollectionService: Collection service instance
    """
    return CollectionService(db=db)


def get_site_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> SiteService:
    """
    Get site service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (default rate limit)

    Returns:
        SiteService: Site service instance
    """
    return SiteService(db=db, default_rate_limit=settings.rate_limit.requests_per_hour)


def get_ingest_service(
    db: AsyncSession = Depends(get_async_db),
    orchestrator: Orchestrator | None = Depends(get_orchestrator),
    queue: IngestionQueue = Depends(get_ingestion_queue),
    settings: Settings = Depends(get_settings_dependency),
) -> IngestService:
    """
    Get ingest service instance.

    Returns:
        IngestService: Service wired to the orchestrator and ingestion queue
    """
    return IngestService(
        db=db,
        orchestrator=orchestrator,
        queue=queue,
        storage_root=settings.storage.documents,
    )


def get_chat_service(
    request: Request,
    orchestrator: Orchestrator | None = Depends(get_orchestrator),
) -> ChatService:
    """
    Get chat service instance.

    Uses the session factory rather than a request-scoped session so that
    streamed answers can be persisted after the response has started.

    Returns:
        ChatService: Chat relay service
    """
    return ChatService(
        session_factory=request.app.state.session_factory,
        orchestrator=orchestrator,
    )


def get_widget_service(db: AsyncSession = Depends(get_async_db)) -> WidgetService:
    """Get widget config service instance."""
    return WidgetService(db=db)


def get_stats_service(
    db: AsyncSession = Depends(get_async_db),
    orchestrator: Orchestrator | None = Depends(get_orchestrator),
) -> StatsService:
    """Get dashboard stats service instance."""
    return StatsService(db=db, orchestrator=orchestrator)
