"""
Public widget API endpoints.

Routes:
- GET /api/widget/config/{site_id} - Widget bootstrap configuration
- POST /api/widget/chat/{site_id} - Single JSON chat turn
- POST /api/widget/chat/{site_id}/stream - Server-Sent Events chat turn

Dependencies: askdoc.application.services
System role: Unauthenticated HTTP surface used by sdk.js
"""

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from askdoc.api.deps.dependencies import (
    get_chat_service,
    get_settings_dependency,
    get_widget_service,
)
from askdoc.application.services.chat_service import ChatService
from askdoc.application.services.widget_service import WidgetService
from askdoc.configs import Settings
from askdoc.models.chat import ChatRequest, ChatResponse, WidgetConfigResponse
from askdoc.models.streaming import StreamChunk

from .error_handling import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/widget", tags=["widget"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def resolve_base_url(request: Request, fallback: str) -> str:
    """
    Public base URL as seen by the embedding page.

    Scheme comes from X-Forwarded-Proto, else the request URL; host comes
    from the Host header. Without a Host header the configured base URL is
    used.
    """
    host = request.headers.get("host")
    if not host:
        return fallback.rstrip("/")
    scheme = request.headers.get("x-forwarded-proto") or request.url.scheme
    scheme = "https" if scheme.split(",")[0].strip() == "https" else "http"
    return f"{scheme}://{host}"


async def _sse_frames(chunks: AsyncIterator[StreamChunk]) -> AsyncIterator[str]:
    """Encode relay chunks as SSE frames; closing this closes the relay."""
    try:
        async for chunk in chunks:
            yield chunk.to_sse()
    finally:
        await chunks.aclose()


@router.get("/config/{site_id}", response_model=WidgetConfigResponse)
@handle_api_errors
async def get_widget_config(
    site_id: str,
    request: Request,
    widget_service: WidgetService = Depends(get_widget_service),
    settings: Settings = Depends(get_settings_dependency),
) -> WidgetConfigResponse:
    """
    Get widget display configuration for a site.

    Raises:
        HTTPException(404): Site not found
    """
    base_url = resolve_base_url(request, settings.server.base_url)
    return await widget_service.get_config(site_id, base_url)


@router.post("/chat/{site_id}", response_model=ChatResponse)
@handle_api_errors
async def chat(
    site_id: str,
    body: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """
    Answer one visitor question.

    Args:
        site_id: Site the widget is embedded on
        body: ChatRequest with message and optional session_id
        chat_service: Injected ChatService

    Returns:
        ChatResponse: session_id, answer and sources

    Raises:
        HTTPException(404): Site not found
    """
    logger.info(
        "Widget chat request",
        extra={"site_id": site_id, "has_session": bool(body.session_id), "message_length": len(body.message)},
    )
    return await chat_service.chat(site_id, body.message, body.session_id)


@router.post("/chat/{site_id}/stream")
@handle_api_errors
async def chat_stream(
    site_id: str,
    body: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """
    Stream one visitor question as Server-Sent Events.

    Frames are `event: <type>` / `data: <json>` pairs; the final frame is
    always a done event carrying session_id. Site lookup happens before the
    response starts, so an unknown site is a plain 404.

    Raises:
        HTTPException(404): Site not found
    """
    turn = await chat_service.start_turn(site_id, body.message, body.session_id)
    logger.info(
        "Widget stream started",
        extra={"site_id": site_id, "session_id": turn.session_id},
    )
    return StreamingResponse(
        _sse_frames(chat_service.stream_turn(turn)),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
