import pytest

from support_backend.database.core.store import ChatStore
from support_backend.database.entities.messages import Sender
from support_backend.exceptions import StorageError

CONVERSATION_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


def test_create_and_get_conversation(store):
    conversation = store.create_conversation(CONVERSATION_ID)

    fetched = store.get_conversation(CONVERSATION_ID)
    assert fetched is not None
    assert fetched.id == CONVERSATION_ID
    assert fetched.created_at == fetched.updated_at == conversation.created_at
    assert fetched.conversation_metadata is None


def test_conversation_metadata_is_persisted(store):
    store.create_conversation(CONVERSATION_ID, metadata='{"channel": "web"}')
    assert store.get_conversation(CONVERSATION_ID).conversation_metadata == '{"channel": "web"}'


def test_missing_conversation_returns_none(store):
    assert store.get_conversation(CONVERSATION_ID) is None


def test_duplicate_conversation_raises_storage_error(store):
    store.create_conversation(CONVERSATION_ID)
    with pytest.raises(StorageError):
        store.create_conversation(CONVERSATION_ID)


def test_message_round_trip(store):
    store.create_conversation(CONVERSATION_ID)
    created = store.create_message("m-1", CONVERSATION_ID, Sender.USER, "Where is my order?")

    [listed] = store.list_messages(CONVERSATION_ID)
    assert listed.id == "m-1"
    assert listed.conversation_id == CONVERSATION_ID
    assert listed.sender == "user"
    assert listed.text == "Where is my order?"
    assert listed.timestamp == created.timestamp


def test_message_for_unknown_conversation_is_rejected(store):
    with pytest.raises(StorageError):
        store.create_message("m-1", CONVERSATION_ID, Sender.USER, "hello")
    assert store.list_messages(CONVERSATION_ID) == []


def test_messages_are_listed_in_insertion_order(store):
    store.create_conversation(CONVERSATION_ID)
    for i in range(6):
        sender = Sender.USER if i % 2 == 0 else Sender.AI
        store.create_message(f"m-{i}", CONVERSATION_ID, sender, f"turn {i}")

    messages = store.list_messages(CONVERSATION_ID)
    assert [m.text for m in messages] == [f"turn {i}" for i in range(6)]
    timestamps = [m.timestamp for m in messages]
    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == len(timestamps)


def test_recent_messages_returns_latest_window_oldest_first(store):
    store.create_conversation(CONVERSATION_ID)
    for i in range(5):
        store.create_message(f"m-{i}", CONVERSATION_ID, Sender.USER, f"turn {i}")

    assert [m.text for m in store.recent_messages(CONVERSATION_ID, 3)] == ["turn 2", "turn 3", "turn 4"]
    assert len(store.recent_messages(CONVERSATION_ID, 50)) == 5
    assert store.recent_messages(CONVERSATION_ID, 0) == []


def test_recent_messages_only_reads_one_conversation(store):
    other_id = "0b1c2d3e-4f50-4a6b-8c7d-9e0f1a2b3c4d"
    store.create_conversation(CONVERSATION_ID)
    store.create_conversation(other_id)
    store.create_message("m-1", CONVERSATION_ID, Sender.USER, "mine")
    store.create_message("m-2", other_id, Sender.USER, "theirs")

    assert [m.text for m in store.recent_messages(CONVERSATION_ID, 10)] == ["mine"]


def test_message_insert_touches_conversation(store):
    before = store.create_conversation(CONVERSATION_ID).updated_at
    message = store.create_message("m-1", CONVERSATION_ID, Sender.AI, "Hi!")

    after = store.get_conversation(CONVERSATION_ID).updated_at
    assert after >= before
    assert after >= message.timestamp


def test_touch_conversation_moves_updated_at_forward(store):
    created = store.create_conversation(CONVERSATION_ID)
    store.touch_conversation(CONVERSATION_ID)

    touched = store.get_conversation(CONVERSATION_ID)
    assert touched.updated_at > created.updated_at
    assert touched.created_at == created.created_at


def test_timestamps_are_utc_iso_strings(store):
    conversation = store.create_conversation(CONVERSATION_ID)
    assert conversation.created_at.endswith("Z")
    assert "T" in conversation.created_at


def test_uninitialized_store_fails_loudly(tmp_path):
    chat_store = ChatStore(str(tmp_path / "chat.db"))
    with pytest.raises(RuntimeError, match="not initialized"):
        chat_store.get_conversation(CONVERSATION_ID)


def test_closed_store_fails_loudly(tmp_path):
    chat_store = ChatStore(str(tmp_path / "chat.db"))
    chat_store.initialize()
    chat_store.close()
    with pytest.raises(RuntimeError):
        chat_store.create_conversation(CONVERSATION_ID)


def test_initialize_creates_directory_and_is_idempotent(tmp_path):
    path = tmp_path / "nested" / "dir" / "chat.db"
    chat_store = ChatStore(str(path))
    chat_store.initialize()
    chat_store.create_conversation(CONVERSATION_ID)
    chat_store.initialize()

    assert path.exists()
    assert chat_store.in_memory is False
    assert chat_store.get_conversation(CONVERSATION_ID) is not None
    chat_store.close()


def test_data_survives_reopen(tmp_path):
    path = str(tmp_path / "chat.db")
    first = ChatStore(path)
    first.initialize()
    first.create_conversation(CONVERSATION_ID)
    first.create_message("m-1", CONVERSATION_ID, Sender.USER, "persist me")
    first.close()

    second = ChatStore(path)
    second.initialize()
    assert second.get_conversation(CONVERSATION_ID) is not None
    assert [m.text for m in second.list_messages(CONVERSATION_ID)] == ["persist me"]
    second.close()


def test_corrupt_file_falls_back_to_memory(tmp_path):
    path = tmp_path / "chat.db"
    path.write_bytes(b"this is definitely not a sqlite database " * 100)

    chat_store = ChatStore(str(path))
    chat_store.initialize()

    assert chat_store.in_memory is True
    chat_store.create_conversation(CONVERSATION_ID)
    assert chat_store.get_conversation(CONVERSATION_ID) is not None
    chat_store.close()


def test_ping(store):
    assert store.ping() is True
    store.close()
    assert store.ping() is False
