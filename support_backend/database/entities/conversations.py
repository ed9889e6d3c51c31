"""
Conversation ORM Model
=======================

The ``Conversation`` ORM model represents one customer-support dialogue thread
stored in the ``conversations`` SQLite table. The conversation id doubles as the
client-facing session identifier.

Key features
~~~~~~~~~~~~
- Text primary key (``id``), caller-supplied or generated UUID
- ISO-8601 ``created_at`` / ``updated_at`` timestamps (UTC)
- Optional opaque ``metadata`` column, persisted but unused by the chat flow

Integration notes
~~~~~~~~~~~~~~~~~
- ``updated_at`` is bumped by the store on every message insert.
- Conversations are never deleted by the service.
"""

from typing import Optional

from sqlalchemy import TEXT
from sqlalchemy.orm import Mapped, mapped_column

from support_backend.database.config.connection_engine import declarativeBase


class Conversation(declarativeBase):
    """
    ORM model for the `conversations` table.

    Attributes
    ----------
    id : str
        Primary key. Session identifier of the conversation.
    created_at : str
        ISO-8601 creation timestamp.
    updated_at : str
        ISO-8601 timestamp of the last message insert (or creation).
    conversation_metadata : str | None
        Opaque metadata stored in the ``metadata`` column.
    """

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(TEXT, primary_key=True)
    """Primary key. Session identifier."""

    created_at: Mapped[str] = mapped_column(TEXT, nullable=False)
    """ISO-8601 creation timestamp."""

    updated_at: Mapped[str] = mapped_column(TEXT, nullable=False)
    """ISO-8601 last-activity timestamp."""

    # `metadata` is reserved on declarative classes, so the attribute is renamed
    conversation_metadata: Mapped[Optional[str]] = mapped_column("metadata", TEXT, nullable=True)
    """Opaque metadata string."""

    def __init__(self, conversation_id: str, created_at: str, updated_at: str, metadata: Optional[str] = None):
        self.id = conversation_id
        self.created_at = created_at
        self.updated_at = updated_at
        self.conversation_metadata = metadata

    def __str__(self) -> str:
        return f"Conversation: id:{self.id}, created: {self.created_at}, updated: {self.updated_at}"
