import asyncio

import pytest
from fastapi.testclient import TestClient

from support_backend.database.config.config import Settings
from support_backend.database.core.store import ChatStore
from support_backend.main import create_app
from support_backend.services.chat_service import ChatService


class FakeGenerator:
    """Reply generator double recording the context of every call."""

    def __init__(self):
        self.reply = "Happy to help!"
        self.error = None
        self.healthy = True
        self.delay = 0.0
        self.calls = []
        self.closed = False

    async def generate_reply(self, history, user_message):
        self.calls.append(([(m.sender, m.text) for m in history], user_message))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply

    async def check_health(self):
        return self.healthy

    async def aclose(self):
        self.closed = True


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        OPENAI_API_KEY="sk-test",
        DATABASE_PATH=str(tmp_path / "data" / "chat.db"),
        MAX_CONVERSATION_HISTORY=20,
        ENVIRONMENT="development",
    )


@pytest.fixture
def store(settings):
    chat_store = ChatStore(settings.DATABASE_PATH)
    chat_store.initialize()
    yield chat_store
    chat_store.close()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def chat_service(store, generator, settings):
    return ChatService(store, generator, settings)


@pytest.fixture
def client(settings, store, generator):
    app = create_app(settings=settings, store=store, generator=generator)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
