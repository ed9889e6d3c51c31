"""
Chat Store
==========

Persistence for conversations and messages.

All data methods are wrapped with the `@transactional` decorator, which manages
SQLAlchemy sessions and transactions. Each method receives an injected
`session: Session`; nested calls share the caller's session, so a message
insert and the conversation touch it triggers commit together.

Lifecycle
---------
The store is an explicit object owned by the process entry point:

.. code-block:: python

    store = ChatStore("./data/chat.db")
    store.initialize()          # load or create the file, create schema
    ...
    store.close()               # dispose the engine at shutdown

Every mutating call commits before it returns. Using the store before
`initialize()` (or after `close()`) raises `RuntimeError`.

Timestamps are ISO-8601 UTC strings with microsecond precision. They are
strictly increasing per store instance, so ordering by timestamp always
reproduces insertion order.
"""

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from support_backend.database.config.connection_engine import build_file_engine, build_memory_engine, metadata
from support_backend.database.daos.conversation_dao import ConversationDao
from support_backend.database.daos.message_dao import MessagesDao
from support_backend.database.entities.conversations import Conversation
from support_backend.database.entities.messages import Message, Sender
from support_backend.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


class ChatStore:
    """
    Owner of the `Conversation` and `Message` records.

    Parameters
    ----------
    database_path : str
        Path of the SQLite file. Its directory is created on first use.
    """

    def __init__(self, database_path: str):
        self.database_path = database_path
        self.in_memory = False
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._last_timestamp: Optional[datetime] = None
        self._conversation_dao = ConversationDao()
        self._messages_dao = MessagesDao()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def initialize(self) -> None:
        """
        Open the database file (or create it) and ensure the schema exists.

        Idempotent. If the file cannot be opened or is not a valid database,
        the failure is logged and the store falls back to an empty in-memory
        database for the lifetime of the process.
        """
        if self._engine is not None:
            return

        existed = Path(self.database_path).exists()
        engine = None
        try:
            engine = build_file_engine(self.database_path)
            metadata.create_all(engine)
        except (SQLAlchemyError, sqlite3.Error, OSError) as e:
            logger.warning(
                "Could not load database at %s (%s); continuing with an in-memory store",
                self.database_path,
                e,
            )
            if engine is not None:
                engine.dispose()
            engine = build_memory_engine()
            metadata.create_all(engine)
            self.in_memory = True
        else:
            if existed:
                logger.info("Loaded existing database from %s", self.database_path)
            else:
                logger.info("Created new database at %s", self.database_path)

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def close(self) -> None:
        """Release the engine. The store must be re-initialized before reuse."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database closed")

    def session_factory(self) -> Session:
        """Open a new session. Raises `RuntimeError` when the store is not initialized."""
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._session_factory()

    def ping(self) -> bool:
        """Return True when a trivial query succeeds against the database."""
        try:
            with self.session_factory() as session:
                session.execute(sql_text("SELECT 1"))
            return True
        except (RuntimeError, SQLAlchemyError) as e:
            logger.warning("Database health check failed: %s", e)
            return False

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    @transactional
    def create_conversation(
        self, conversation_id: str, metadata: Optional[str] = None, session: Session = None
    ) -> Conversation:
        """
        Insert a conversation with `created_at == updated_at == now`.

        Raises
        ------
        StorageError
            If a conversation with this id already exists.
        """
        now = self._next_timestamp()
        conversation = Conversation(
            conversation_id=conversation_id,
            created_at=now,
            updated_at=now,
            metadata=metadata,
        )
        return self._conversation_dao.createConversation(session, conversation)

    @transactional
    def get_conversation(self, conversation_id: str, session: Session = None) -> Optional[Conversation]:
        """Point lookup; returns None when the conversation does not exist."""
        return self._conversation_dao.fetchConversationById(session, conversation_id)

    @transactional
    def touch_conversation(self, conversation_id: str, session: Session = None) -> None:
        """Set the conversation's `updated_at` to now."""
        self._conversation_dao.updateConversationTimestamp(
            session, conversation_id=conversation_id, timestamp=self._next_timestamp()
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    @transactional
    def create_message(
        self,
        message_id: str,
        conversation_id: str,
        sender: Sender,
        text: str,
        session: Session = None,
    ) -> Message:
        """
        Insert a message stamped with now and bump its conversation's `updated_at`
        to the same instant. Both writes commit in one transaction.
        """
        timestamp = self._next_timestamp()
        message = Message(
            message_id=message_id,
            conversation_id=conversation_id,
            sender=sender,
            text=text,
            timestamp=timestamp,
        )
        self._messages_dao.createMessage(session, message)
        self._conversation_dao.updateConversationTimestamp(
            session, conversation_id=conversation_id, timestamp=timestamp
        )
        return message

    @transactional
    def list_messages(self, conversation_id: str, session: Session = None) -> List[Message]:
        """All messages of a conversation, oldest first."""
        return self._messages_dao.fetchMessagesByConversationId(session, conversation_id)

    @transactional
    def recent_messages(self, conversation_id: str, limit: int, session: Session = None) -> List[Message]:
        """The `limit` most recent messages of a conversation, oldest first."""
        if limit <= 0:
            return []
        return self._messages_dao.fetchRecentMessagesByConversationId(session, conversation_id, limit)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _next_timestamp(self) -> str:
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now.isoformat(timespec="microseconds").replace("+00:00", "Z")
