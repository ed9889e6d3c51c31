import asyncio
import uuid

import pytest

from support_backend.api.utils import is_valid_session_id
from support_backend.database.entities.conversations import Conversation
from support_backend.exceptions import (
    ConversationNotFoundError,
    EmptyMessageError,
    InvalidRequestError,
    RateLimitError,
)
from support_backend.services.chat_service import ChatService


def _conversation_count(store):
    with store.session_factory() as session:
        return session.query(Conversation).count()


def _transcript(store, session_id):
    return [(m.sender, m.text) for m in store.list_messages(session_id)]


async def test_send_message_starts_new_session(chat_service, store, generator):
    exchange = await chat_service.send_message("Hello")

    assert exchange.reply == "Happy to help!"
    assert is_valid_session_id(exchange.session_id)
    assert _transcript(store, exchange.session_id) == [("user", "Hello"), ("ai", "Happy to help!")]
    assert generator.calls == [([], "Hello")]


async def test_history_excludes_the_new_message(chat_service, generator):
    first = await chat_service.send_message("What are your hours?")
    await chat_service.send_message("And on Sunday?", first.session_id)

    history, user_message = generator.calls[-1]
    assert user_message == "And on Sunday?"
    assert history == [("user", "What are your hours?"), ("ai", "Happy to help!")]


async def test_supplied_session_is_created_once(chat_service, store):
    session_id = str(uuid.uuid4())

    first = await chat_service.send_message("one", session_id)
    second = await chat_service.send_message("two", session_id)

    assert first.session_id == second.session_id == session_id
    assert _conversation_count(store) == 1
    assert len(store.list_messages(session_id)) == 4


async def test_history_window_is_bounded(store, generator, settings):
    settings.MAX_CONVERSATION_HISTORY = 2
    service = ChatService(store, generator, settings)

    first = await service.send_message("one")
    await service.send_message("two", first.session_id)
    await service.send_message("three", first.session_id)

    history, _ = generator.calls[-1]
    assert history == [("user", "two"), ("ai", "Happy to help!")]


async def test_generator_failure_stores_apology_and_reraises(chat_service, store, generator):
    session_id = str(uuid.uuid4())
    generator.error = RateLimitError()

    with pytest.raises(RateLimitError):
        await chat_service.send_message("Is my order late?", session_id)

    transcript = _transcript(store, session_id)
    assert transcript[0] == ("user", "Is my order late?")
    assert len(transcript) == 2
    sender, text = transcript[1]
    assert sender == "ai"
    assert text == chat_service.apology_reply
    assert "support@techstyle.com" in text


async def test_empty_after_sanitization_touches_nothing(chat_service, store, generator):
    with pytest.raises(EmptyMessageError):
        await chat_service.send_message(" " * 15)

    assert _conversation_count(store) == 0
    assert generator.calls == []


async def test_length_boundaries(chat_service):
    await chat_service.send_message("x" * 2000)

    with pytest.raises(InvalidRequestError):
        await chat_service.send_message("x" * 2001)
    with pytest.raises(InvalidRequestError):
        await chat_service.send_message("")


async def test_long_whitespace_runs_are_collapsed_before_storage(chat_service, store):
    exchange = await chat_service.send_message("hi" + " " * 15 + "there")

    assert store.list_messages(exchange.session_id)[0].text == "hi" + " " * 10 + "there"


async def test_malformed_session_id_is_rejected(chat_service, store):
    with pytest.raises(InvalidRequestError) as exc_info:
        await chat_service.send_message("Hello", "not-a-uuid")

    assert exc_info.value.code == "INVALID_SESSION_ID"
    assert _conversation_count(store) == 0


def test_start_new_conversation(chat_service, store):
    session_id = chat_service.start_new_conversation()

    assert store.get_conversation(session_id) is not None
    assert chat_service.get_history(session_id) == []


def test_history_of_unknown_session_is_not_found(chat_service):
    with pytest.raises(ConversationNotFoundError):
        chat_service.get_history(str(uuid.uuid4()))


def test_history_with_malformed_id_is_rejected(chat_service):
    with pytest.raises(InvalidRequestError) as exc_info:
        chat_service.get_history("12345")
    assert exc_info.value.status_code == 400


async def test_same_session_requests_are_serialized(chat_service, generator):
    session_id = str(uuid.uuid4())
    generator.delay = 0.05

    await asyncio.gather(
        chat_service.send_message("first", session_id),
        chat_service.send_message("second", session_id),
    )

    history_sizes = sorted(len(history) for history, _ in generator.calls)
    assert history_sizes == [0, 2]
    assert len(chat_service.locks) == 0


async def test_different_sessions_do_not_wait_on_each_other(chat_service, generator):
    generator.delay = 0.05

    results = await asyncio.gather(
        chat_service.send_message("a", str(uuid.uuid4())),
        chat_service.send_message("b", str(uuid.uuid4())),
    )

    assert len({r.session_id for r in results}) == 2
    assert all(len(history) == 0 for history, _ in generator.calls)
