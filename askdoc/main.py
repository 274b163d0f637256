"""
FastAPI application with assembled routers.

Builds the app, wires middleware and error rendering, and owns the
lifespan of the metadata engine, orchestrator and ingestion queue.

Dependencies: fastapi, askdoc.api.routers, askdoc.boundary, askdoc.application
System role: API entry point with router assembly
"""

from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from askdoc import __version__
from askdoc.api.middleware.cors import CORSMiddleware
from askdoc.api.routers import admin_router, health_router, static_router, widget_router
from askdoc.application.ingestion_queue import IngestionQueue
from askdoc.boundary.db import create_tables, get_async_engine, get_async_session_factory
from askdoc.boundary.rag.langchain_orchestrator import LangChainOrchestrator
from askdoc.boundary.rag.orchestrator import Orchestrator
from askdoc.configs import Settings, get_settings
from askdoc.observability import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
    get_logger,
)

logger = get_logger(__name__)

OrchestratorFactory = Callable[[Settings], Awaitable[Orchestrator]]


async def default_orchestrator_factory(settings: Settings) -> Orchestrator:
    """Build the LangChain/FAISS orchestrator from settings."""
    return await LangChainOrchestrator.create(settings.rag, settings.llm)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": message}."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies and parameters as 400."""
    message = _validation_message(exc)
    logger.warning("Request validation failed", extra={"path": request.url.path, "error": message})
    return JSONResponse(status_code=400, content={"error": message})


def create_app(
    settings: Settings | None = None,
    orchestrator_factory: OrchestratorFactory | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Application settings; defaults to get_settings()
        orchestrator_factory: Async callable building the orchestrator;
            defaults to the LangChain/FAISS implementation

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = settings or get_settings()
    build_orchestrator = orchestrator_factory or default_orchestrator_factory

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan context manager.

        Startup builds the metadata engine, orchestrator and ingestion
        queue; shutdown drains the queue and releases them in reverse.
        """
        configure_logging(settings.log_level)
        Path(settings.storage.documents).expanduser().mkdir(parents=True, exist_ok=True)

        engine = get_async_engine(settings.database)
        await create_tables(engine)
        session_factory = get_async_session_factory(engine)

        try:
            orchestrator = await build_orchestrator(settings)
        except Exception as e:
            logger.exception(
                "Orchestrator unavailable; running without document Q&A",
                extra={"error": str(e)},
            )
            orchestrator = None

        queue = IngestionQueue(session_factory, orchestrator)
        await queue.recover()

        app.state.engine = engine
        app.state.session_factory = session_factory
        app.state.orchestrator = orchestrator
        app.state.ingestion_queue = queue

        logger.info(
            "AskDoc started",
            extra={
                "address": settings.server.address,
                "orchestrator": type(orchestrator).__name__ if orchestrator else None,
                "auth_enabled": bool(settings.admin.api_key),
            },
        )

        yield

        await queue.shutdown()
        if orchestrator is not None:
            await orchestrator.close()
        await engine.dispose()
        logger.info("AskDoc stopped")

    app = FastAPI(
        title="AskDoc API",
        description="Document Q&A service with an embeddable chat widget",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Added last so it runs first: preflights never reach routing or auth
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=settings.server.allow_origins)

    app.include_router(health_router)
    app.include_router(static_router)
    app.include_router(widget_router)
    app.include_router(admin_router)

    return app
