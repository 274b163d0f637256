"""
Test suite for ChatService.

Exercises the relay against the in-memory database and the scriptable
orchestrator: session resolution, transcript persistence and the single
terminal done chunk.

System role: Verification of chat relay orchestration
"""

import pytest

from askdoc.application.services.chat_service import ChatService
from askdoc.boundary.db.CRUD.message_crud import message_crud
from askdoc.boundary.db.CRUD.session_crud import session_crud
from askdoc.boundary.db.CRUD.site_crud import site_crud
from askdoc.boundary.db.models.message_model import MessageRole
from askdoc.core.exceptions import NotFoundError
from askdoc.models.streaming import StreamChunk, StreamChunkType


@pytest.fixture
async def site_id(session_factory) -> str:
    async with session_factory() as db:
        site = await site_crud.create(db, name="Docs", domain="docs.example.com", collection_ids=["c1", "c2"])
        await db.commit()
        return site.id


@pytest.fixture
def chat_service(session_factory, fake_orchestrator) -> ChatService:
    return ChatService(session_factory=session_factory, orchestrator=fake_orchestrator)


async def _transcript(session_factory, session_id: str) -> list[tuple[MessageRole, str]]:
    async with session_factory() as db:
        messages = await message_crud.list_by_session(db, session_id)
        return [(m.role, m.content) for m in messages]


async def _collect(service: ChatService, turn) -> list[StreamChunk]:
    return [chunk async for chunk in service.stream_turn(turn)]


class TestChatServiceChat:
    """Test suite for ChatService.chat()."""

    @pytest.mark.asyncio
    async def test_chat_should_persist_both_messages(self, chat_service, session_factory, site_id) -> None:
        # Act
        response = await chat_service.chat(site_id, "What is AskDoc?")

        # Assert
        assert response.answer == "The answer."
        assert await _transcript(session_factory, response.session_id) == [
            (MessageRole.USER, "What is AskDoc?"),
            (MessageRole.ASSISTANT, "The answer."),
        ]

    @pytest.mark.asyncio
    async def test_chat_should_restrict_to_site_collections(self, chat_service, fake_orchestrator, site_id) -> None:
        # Act
        await chat_service.chat(site_id, "q")

        # Assert
        assert fake_orchestrator.chat_calls == [("q", ["c1", "c2"])]

    @pytest.mark.asyncio
    async def test_unknown_session_should_start_new_one(self, chat_service, site_id) -> None:
        # Act
        response = await chat_service.chat(site_id, "q", session_id="does-not-exist")

        # Assert
        assert response.session_id != "does-not-exist"

    @pytest.mark.asyncio
    async def test_session_from_other_site_should_not_be_reused(self, chat_service, session_factory, site_id) -> None:
        # Arrange
        async with session_factory() as db:
            other = await site_crud.create(db, name="Other", domain="other.example", collection_ids=[])
            foreign = await session_crud.create(db, site_id=other.id)
            await db.commit()

        # Act
        response = await chat_service.chat(site_id, "q", session_id=foreign.id)

        # Assert
        assert response.session_id != foreign.id
        assert await _transcript(session_factory, foreign.id) == []

    @pytest.mark.asyncio
    async def test_unknown_site_should_raise(self, chat_service) -> None:
        # Act & Assert
        with pytest.raises(NotFoundError):
            await chat_service.chat("missing", "q")

    @pytest.mark.asyncio
    async def test_orchestrator_failure_should_be_recorded(
        self, chat_service, fake_orchestrator, session_factory, site_id
    ) -> None:
        # Arrange
        fake_orchestrator.chat_error = RuntimeError("timeout")

        # Act
        response = await chat_service.chat(site_id, "q")

        # Assert
        assert response.answer == "Error from Agent: timeout"
        transcript = await _transcript(session_factory, response.session_id)
        assert transcript[-1] == (MessageRole.ASSISTANT, "Error from Agent: timeout")


class TestChatServiceStream:
    """Test suite for ChatService.start_turn() + stream_turn()."""

    @pytest.mark.asyncio
    async def test_user_message_should_be_persisted_before_streaming(
        self, chat_service, session_factory, site_id
    ) -> None:
        # Act
        turn = await chat_service.start_turn(site_id, "hello")

        # Assert
        assert await _transcript(session_factory, turn.session_id) == [(MessageRole.USER, "hello")]

    @pytest.mark.asyncio
    async def test_stream_should_persist_accumulated_answer(
        self, chat_service, session_factory, site_id
    ) -> None:
        # Arrange
        turn = await chat_service.start_turn(site_id, "hello")

        # Act
        chunks = await _collect(chat_service, turn)

        # Assert
        assert chunks[-1].type is StreamChunkType.DONE
        assert chunks[-1].session_id == turn.session_id
        async with session_factory() as db:
            messages = await message_crud.list_by_session(db, turn.session_id)
        assert messages[-1].content == "The answer."
        assert messages[-1].sources[0]["filename"] == "guide.md"

    @pytest.mark.asyncio
    async def test_stream_without_done_should_get_one(self, chat_service, fake_orchestrator, site_id) -> None:
        # Arrange
        fake_orchestrator.stream_chunks = [StreamChunk.text("a"), StreamChunk.text("b")]
        turn = await chat_service.start_turn(site_id, "hello")

        # Act
        chunks = await _collect(chat_service, turn)

        # Assert
        assert [c.type for c in chunks] == [StreamChunkType.CONTENT, StreamChunkType.CONTENT, StreamChunkType.DONE]

    @pytest.mark.asyncio
    async def test_chunks_after_first_done_should_be_dropped(
        self, chat_service, fake_orchestrator, session_factory, site_id
    ) -> None:
        # Arrange
        fake_orchestrator.stream_chunks = [
            StreamChunk.text("kept"),
            StreamChunk.done(),
            StreamChunk.text("dropped"),
            StreamChunk.done(),
        ]
        turn = await chat_service.start_turn(site_id, "hello")

        # Act
        chunks = await _collect(chat_service, turn)

        # Assert
        assert [c.type for c in chunks].count(StreamChunkType.DONE) == 1
        transcript = await _transcript(session_factory, turn.session_id)
        assert transcript[-1] == (MessageRole.ASSISTANT, "kept")

    @pytest.mark.asyncio
    async def test_error_chunk_should_be_recorded_as_agent_error(
        self, chat_service, fake_orchestrator, session_factory, site_id
    ) -> None:
        # Arrange
        fake_orchestrator.stream_chunks = [StreamChunk.error("rate limited")]
        turn = await chat_service.start_turn(site_id, "hello")

        # Act
        chunks = await _collect(chat_service, turn)

        # Assert
        assert [c.type for c in chunks] == [StreamChunkType.ERROR, StreamChunkType.DONE]
        transcript = await _transcript(session_factory, turn.session_id)
        assert transcript[-1] == (MessageRole.ASSISTANT, "Error from Agent: rate limited")

    @pytest.mark.asyncio
    async def test_error_chunk_should_end_the_relay(
        self, chat_service, fake_orchestrator, session_factory, site_id
    ) -> None:
        # Arrange
        fake_orchestrator.stream_chunks = [
            StreamChunk.error("boom"),
            StreamChunk.text("late content"),
            StreamChunk.thinking("still going"),
        ]
        turn = await chat_service.start_turn(site_id, "hello")

        # Act
        chunks = await _collect(chat_service, turn)

        # Assert
        assert [c.type for c in chunks] == [StreamChunkType.ERROR, StreamChunkType.DONE]
        assert chunks[-1].session_id == turn.session_id
        transcript = await _transcript(session_factory, turn.session_id)
        assert transcript[-1] == (MessageRole.ASSISTANT, "Error from Agent: boom")

    @pytest.mark.asyncio
    async def test_closing_early_should_still_record_answer(
        self, chat_service, session_factory, site_id
    ) -> None:
        # Arrange
        turn = await chat_service.start_turn(site_id, "hello")
        stream = chat_service.stream_turn(turn)

        # Act
        await stream.__anext__()
        await stream.__anext__()
        await stream.aclose()

        # Assert
        transcript = await _transcript(session_factory, turn.session_id)
        assert transcript == [(MessageRole.USER, "hello"), (MessageRole.ASSISTANT, "The ")]

    @pytest.mark.asyncio
    async def test_degraded_stream_should_send_placeholder(self, session_factory, site_id) -> None:
        # Arrange
        service = ChatService(session_factory=session_factory, orchestrator=None)
        turn = await service.start_turn(site_id, "hello")

        # Act
        chunks = await _collect(service, turn)

        # Assert
        assert [(c.type, c.content) for c in chunks[:2]] == [
            (StreamChunkType.THINKING, "Processing..."),
            (StreamChunkType.CONTENT, "Orchestrator Agent not configured."),
        ]
        assert chunks[-1].type is StreamChunkType.DONE
        assert len(chunks) == 3
