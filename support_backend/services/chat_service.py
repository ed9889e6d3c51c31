"""Chat orchestration: session resolution, history window, reply persistence.

All chat operations the HTTP layer exposes go through `ChatService`, so the
ordering rules of a message exchange live in one place:

1. validate and sanitize the inbound text
2. resolve (or create) the conversation
3. read the history window, before the new message is stored
4. store the user message
5. ask the generator for a reply and store the outcome

Steps 2-5 of one session run under that session's lock; different sessions
never wait on each other.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from uuid import uuid4

from support_backend.api.llm_pipeline import ReplyGenerator
from support_backend.api.prompt_utilities import load_store_info
from support_backend.api.utils import (
    MAX_MESSAGE_LENGTH,
    MIN_MESSAGE_LENGTH,
    is_valid_session_id,
    sanitize_message,
)
from support_backend.database.config.config import Settings
from support_backend.database.core.store import ChatStore
from support_backend.database.entities.messages import Message, Sender
from support_backend.exceptions import (
    ConversationNotFoundError,
    EmptyMessageError,
    InvalidRequestError,
    LLMError,
)

logger = logging.getLogger(__name__)

APOLOGY_TEMPLATE = (
    "I apologize, but I'm having trouble processing your request right now. "
    "Please try again in a moment, or contact our support team at {support_email} "
    "for immediate assistance."
)


@dataclass
class ReplyOutcome:
    """Result of one generation attempt: either `reply` or `error` is set."""

    reply: Optional[str] = None
    error: Optional[LLMError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ChatExchange:
    """What `send_message` hands back to the caller."""

    reply: str
    session_id: str


@dataclass
class SessionLocks:
    """Asyncio lock manager keyed by session id.

    Locks are created on first use and dropped once nobody holds or waits on them.
    """

    _locks: Dict[str, asyncio.Lock] = field(default_factory=dict)
    _holders: Dict[str, int] = field(default_factory=dict)

    @asynccontextmanager
    async def acquire(self, session_id: str):
        if session_id not in self._locks:
            self._locks[session_id] = asyncio.Lock()
        lock = self._locks[session_id]
        self._holders[session_id] = self._holders.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[session_id] -= 1
            if self._holders[session_id] == 0:
                del self._holders[session_id]
                del self._locks[session_id]

    def __len__(self) -> int:
        return len(self._locks)


class ChatService:
    """Orchestrates the store and the reply generator for chat requests."""

    def __init__(
        self,
        store: ChatStore,
        generator: ReplyGenerator,
        settings: Settings,
        apology_reply: Optional[str] = None,
    ):
        self.store = store
        self.generator = generator
        self.settings = settings
        self.locks = SessionLocks()
        self.apology_reply = apology_reply or APOLOGY_TEMPLATE.format(
            support_email=load_store_info()["support_email"]
        )

    async def send_message(self, message: str, session_id: Optional[str] = None) -> ChatExchange:
        """Store a user message, generate the reply, store it and return it.

        Args:
            message: Raw user text (1-2000 characters before trimming).
            session_id: Existing or client-chosen session id (UUID-v4). A new
                one is generated when omitted.

        Raises:
            InvalidRequestError: Bad length or malformed session id.
            EmptyMessageError: Nothing left after sanitization.
            LLMError: The generator failed. The apology reply has already
                been stored in the transcript.
            StorageError: A store read or write failed.
        """
        if session_id is not None:
            self._require_valid_session_id(session_id)
        if not MIN_MESSAGE_LENGTH <= len(message) <= MAX_MESSAGE_LENGTH:
            raise InvalidRequestError(
                f"Message must be between {MIN_MESSAGE_LENGTH} and {MAX_MESSAGE_LENGTH} characters"
            )

        text = sanitize_message(message)
        if not text:
            raise EmptyMessageError()

        session_id = session_id or str(uuid4())

        async with self.locks.acquire(session_id):
            self._resolve_session(session_id)

            history = self.store.recent_messages(session_id, self.settings.MAX_CONVERSATION_HISTORY)
            self.store.create_message(str(uuid4()), session_id, Sender.USER, text)

            outcome = await self._attempt_reply(history, text)
            if not outcome.ok:
                self.store.create_message(str(uuid4()), session_id, Sender.AI, self.apology_reply)
                logger.warning(
                    "Reply failed for conversation %s (%s); apology stored",
                    session_id,
                    outcome.error.code,
                )
                raise outcome.error

            self.store.create_message(str(uuid4()), session_id, Sender.AI, outcome.reply)

        logger.info("Reply generated for conversation %s", session_id)
        return ChatExchange(reply=outcome.reply, session_id=session_id)

    def start_new_conversation(self) -> str:
        """Create an empty conversation under a fresh id and return the id."""
        session_id = str(uuid4())
        self.store.create_conversation(session_id)
        logger.info("Conversation %s created", session_id)
        return session_id

    def get_history(self, session_id: str) -> List[Message]:
        """Full transcript of a conversation, oldest first.

        Raises:
            InvalidRequestError: `session_id` is not a UUID-v4 (code `INVALID_SESSION_ID`).
            ConversationNotFoundError: No conversation has this id.
        """
        self._require_valid_session_id(session_id)
        if self.store.get_conversation(session_id) is None:
            raise ConversationNotFoundError()
        return self.store.list_messages(session_id)

    def _resolve_session(self, session_id: str) -> None:
        if self.store.get_conversation(session_id) is None:
            self.store.create_conversation(session_id)
            logger.info("Conversation %s created", session_id)

    async def _attempt_reply(self, history: Sequence[Message], text: str) -> ReplyOutcome:
        try:
            reply = await self.generator.generate_reply(history, text)
        except LLMError as e:
            return ReplyOutcome(error=e)
        return ReplyOutcome(reply=reply)

    @staticmethod
    def _require_valid_session_id(session_id: str) -> None:
        if not is_valid_session_id(session_id):
            raise InvalidRequestError("Invalid session ID format", code="INVALID_SESSION_ID")
