import uuid

import pytest
from pydantic import ValidationError

from support_backend.api.models import ChatMessageRequest, MessageOut
from support_backend.api.utils import MAX_MESSAGE_LENGTH, is_valid_session_id, sanitize_message
from support_backend.database.entities.messages import Message


@pytest.mark.parametrize(
    "session_id, expected",
    [
        (str(uuid.uuid4()), True),
        (str(uuid.uuid4()).upper(), True),
        ("7c9e6679-7425-40de-944b-e07fc1f90ae7", True),
        (str(uuid.uuid1()), False),
        ("7c9e6679-7425-40de-c44b-e07fc1f90ae7", False),
        (str(uuid.uuid4()) + "\n", False),
        ("\n" + str(uuid.uuid4()), False),
        ("not-a-uuid", False),
        ("", False),
    ],
)
def test_is_valid_session_id(session_id, expected):
    assert is_valid_session_id(session_id) is expected


def test_sanitize_trims_and_strips_nul():
    assert sanitize_message("  hello\0 world  ") == "hello world"


def test_sanitize_collapses_long_whitespace_runs():
    assert sanitize_message("hi" + " " * 15 + "there") == "hi" + " " * 10 + "there"
    assert sanitize_message("a" + "\t\n" * 6 + "b") == "a" + " " * 10 + "b"


def test_sanitize_keeps_short_whitespace_runs():
    text = "a" + " " * 9 + "b"
    assert sanitize_message(text) == text


def test_sanitize_whitespace_only_becomes_empty():
    assert sanitize_message(" " * 15) == ""
    assert sanitize_message("\0\0") == ""


def test_request_accepts_max_length_message():
    request = ChatMessageRequest(message="x" * MAX_MESSAGE_LENGTH)
    assert len(request.message) == MAX_MESSAGE_LENGTH
    assert request.sessionId is None


def test_request_rejects_too_long_message():
    with pytest.raises(ValidationError):
        ChatMessageRequest(message="x" * (MAX_MESSAGE_LENGTH + 1))


def test_request_rejects_empty_message():
    with pytest.raises(ValidationError):
        ChatMessageRequest(message="")


def test_request_rejects_malformed_session_id():
    with pytest.raises(ValidationError) as exc_info:
        ChatMessageRequest(message="hello", sessionId="12345")
    assert exc_info.value.errors()[0]["msg"] == "Invalid session ID format"


def test_message_out_serializes_camel_case():
    message = Message(
        message_id="m-1",
        conversation_id="7c9e6679-7425-40de-944b-e07fc1f90ae7",
        sender="ai",
        text="Hello!",
        timestamp="2024-01-01T00:00:00.000000Z",
    )
    dumped = MessageOut.model_validate(message).model_dump(by_alias=True)
    assert dumped == {
        "id": "m-1",
        "conversationId": "7c9e6679-7425-40de-944b-e07fc1f90ae7",
        "sender": "ai",
        "text": "Hello!",
        "timestamp": "2024-01-01T00:00:00.000000Z",
    }


def test_message_str_names_the_message():
    message = Message(
        message_id="m-1",
        conversation_id="7c9e6679-7425-40de-944b-e07fc1f90ae7",
        sender="user",
        text="Hi",
        timestamp="2024-01-01T00:00:00.000000Z",
    )
    assert str(message).startswith("Message: id:m-1, ")
    assert "conversation: 7c9e6679-7425-40de-944b-e07fc1f90ae7" in str(message)
