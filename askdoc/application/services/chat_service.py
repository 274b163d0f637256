"""
Widget chat relay service.

Relays visitor questions to the orchestrator, restricted to the site's
collections, and records every turn in the chat transcript.

Each database write uses a short-lived session from the session factory,
so a long SSE stream never holds a request-scoped session open.

Dependencies: askdoc.boundary.db, askdoc.boundary.rag
System role: Chat use case orchestration (JSON and streaming)
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from askdoc.boundary.db.CRUD.message_crud import message_crud
from askdoc.boundary.db.CRUD.session_crud import session_crud
from askdoc.boundary.db.CRUD.site_crud import site_crud
from askdoc.boundary.db.models.message_model import MessageRole
from askdoc.boundary.rag.orchestrator import Orchestrator
from askdoc.core.exceptions import NotFoundError
from askdoc.models.chat import ChatResponse, Source
from askdoc.models.streaming import StreamChunk, StreamChunkType

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Orchestrator Agent not configured."


def agent_error_text(error: object) -> str:
    """Answer text recorded when the orchestrator fails."""
    return f"Error from Agent: {error}"


@dataclass
class ChatTurn:
    """
    One visitor question, after its site and session are resolved.

    Attributes:
        site_id: Site the widget is embedded on
        session_id: Session the turn belongs to (new or continued)
        message: Visitor's question
        collection_ids: Collections retrieval is restricted to
    """

    site_id: str
    session_id: str
    message: str
    collection_ids: list[str] = field(default_factory=list)


async def _not_configured_stream() -> AsyncIterator[StreamChunk]:
    yield StreamChunk.thinking("Processing...")
    yield StreamChunk.text(NOT_CONFIGURED_MESSAGE)
    yield StreamChunk.done()


class ChatService:
    """Chat relay between the widget and the orchestrator."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        orchestrator: Orchestrator | None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            session_factory: Metadata database session factory
            orchestrator: RAG backend, None in degraded mode
        """
        self._session_factory = session_factory
        self._orchestrator = orchestrator

    async def start_turn(self, site_id: str, message: str, session_id: str | None = None) -> ChatTurn:
        """
        Resolve site and session, then persist the user message.

        An unknown session id, or one opened on another site, starts a
        new session.

        Args:
            site_id: Site the widget is embedded on
            message: Visitor's question
            session_id: Session to continue, if any

        Returns:
            ChatTurn: Resolved turn

        Raises:
            NotFoundError: If the site does not exist
        """
        async with self._session_factory() as db:
            site = await site_crud.get_by_id(db, site_id)
            if site is None:
                raise NotFoundError("site not found", site_id)

            chat_session = None
            if session_id:
                chat_session = await session_crud.get_by_id(db, session_id)
                if chat_session is not None and chat_session.site_id != site.id:
                    chat_session = None

            if chat_session is None:
                chat_session = await session_crud.create(db, site_id=site.id)
                logger.info(
                    "Chat session started",
                    extra={"site_id": site.id, "session_id": chat_session.id},
                )

            await message_crud.add_message(db, chat_session.id, MessageRole.USER, message)
            await db.commit()

            return ChatTurn(
                site_id=site.id,
                session_id=chat_session.id,
                message=message,
                collection_ids=list(site.collection_ids or []),
            )

    async def finish_turn(self, turn: ChatTurn, answer: str, sources: list[Source]) -> None:
        """Persist the assistant message and bump the session."""
        async with self._session_factory() as db:
            await message_crud.add_message(
                db,
                turn.session_id,
                MessageRole.ASSISTANT,
                answer,
                sources=[s.model_dump() for s in sources] if sources else None,
            )
            await session_crud.touch(db, turn.session_id)
            await db.commit()

    async def chat(self, site_id: str, message: str, session_id: str | None = None) -> ChatResponse:
        """
        Answer one question as a single JSON response.

        Orchestrator failures are downgraded to an error answer rather than
        raised.

        Raises:
            NotFoundError: If the site does not exist
        """
        turn = await self.start_turn(site_id, message, session_id)

        sources: list[Source] = []
        if self._orchestrator is None:
            answer = f"{NOT_CONFIGURED_MESSAGE} Your question: {message}"
        else:
            try:
                result = await self._orchestrator.chat(message, turn.collection_ids)
                answer, sources = result.answer, list(result.sources)
            except Exception as e:
                logger.error(
                    "Orchestrator chat failed",
                    extra={"site_id": site_id, "session_id": turn.session_id, "error": str(e)},
                )
                answer = agent_error_text(e)

        await self.finish_turn(turn, answer, sources)
        return ChatResponse(session_id=turn.session_id, answer=answer, sources=sources)

    async def stream_turn(self, turn: ChatTurn) -> AsyncIterator[StreamChunk]:
        """
        Relay the orchestrator's stream for a started turn.

        Yields thinking, content, sources and error chunks as they arrive and
        exactly one terminal done chunk carrying the session id. The first
        upstream done or error ends the relay; anything after it is dropped.

        Args:
            turn: Turn returned by start_turn()

        Yields:
            StreamChunk: Relayed chunks
        """
        if self._orchestrator is None:
            upstream = _not_configured_stream()
        else:
            upstream = self._orchestrator.chat_stream(turn.message, turn.collection_ids)

        parts: list[str] = []
        sources: list[Source] = []
        error: str | None = None

        try:
            try:
                async for chunk in upstream:
                    if chunk.type is StreamChunkType.DONE:
                        break
                    if chunk.type is StreamChunkType.CONTENT:
                        parts.append(chunk.content or "")
                    elif chunk.type is StreamChunkType.SOURCES:
                        sources = list(chunk.sources or [])
                    elif chunk.type is StreamChunkType.ERROR:
                        error = chunk.content or "unknown error"
                    yield chunk
                    if error is not None:
                        break
            except Exception as e:
                logger.error(
                    "Orchestrator stream failed",
                    extra={"site_id": turn.site_id, "session_id": turn.session_id, "error": str(e)},
                )
                error = str(e)
                yield StreamChunk.error(error)
        finally:
            answer = agent_error_text(error) if error is not None else "".join(parts)
            try:
                # Shielded so a client disconnect still records the answer
                await asyncio.shield(self.finish_turn(turn, answer, sources))
            finally:
                aclose = getattr(upstream, "aclose", None)
                if aclose is not None:
                    await aclose()

        yield StreamChunk.done(turn.session_id)
