"""
Message ORM Model
=================

The ``Message`` ORM model represents one stored turn of a conversation. Each
message is tied to a ``Conversation`` via a foreign key and is immutable once
written.

Key features
~~~~~~~~~~~~
- Text primary key (``id``)
- Foreign key reference to ``conversations.id`` (``conversation_id``)
- Sender restricted to ``user`` / ``ai`` by a CHECK constraint
- ISO-8601 ``timestamp`` used for ordering, indexed together with
  ``conversation_id``

"""

from enum import Enum

from sqlalchemy import TEXT, CheckConstraint, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from support_backend.database.config.connection_engine import declarativeBase


class Sender(str, Enum):
    """Author of a stored message. System prompts are never persisted."""

    USER = "user"
    AI = "ai"


class Message(declarativeBase):
    """
    ORM model for the `messages` table.

    Attributes
    ----------
    id : str
        Primary key. Unique identifier for the message.
    conversation_id : str
        Foreign key reference to the `conversations` table.
    sender : str
        ``"user"`` or ``"ai"``.
    text : str
        Sanitized message content.
    timestamp : str
        ISO-8601 creation timestamp (UTC).
    """

    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint("sender IN ('user', 'ai')", name="ck_messages_sender"),
        Index("idx_messages_conversation", "conversation_id"),
        Index("idx_messages_timestamp", "timestamp"),
    )

    id: Mapped[str] = mapped_column(TEXT, primary_key=True)
    """Primary key. Message identifier."""

    conversation_id: Mapped[str] = mapped_column(TEXT, ForeignKey("conversations.id"), nullable=False)
    """Foreign key to the conversation this message belongs to."""

    sender: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Author of the message (user or ai)."""

    text: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Text content of the message (cannot be null)."""

    timestamp: Mapped[str] = mapped_column(TEXT, nullable=False)
    """ISO-8601 creation timestamp."""

    def __init__(self, message_id: str, conversation_id: str, sender: Sender | str, text: str, timestamp: str):
        """
        Initialize a new Message object.

        Parameters
        ----------
        message_id : str
            Unique identifier of the message.
        conversation_id : str
            ID of the conversation this message belongs to.
        sender : Sender | str
            Author of the message.
        text : str
            The content of the message.
        timestamp : str
            ISO-8601 creation timestamp.
        """
        self.id = message_id
        self.conversation_id = conversation_id
        self.sender = Sender(sender).value
        self.text = text
        self.timestamp = timestamp

    def __str__(self) -> str:
        return (
            f"Message: id:{self.id}, "
            f"conversation: {self.conversation_id}, "
            f"sender: {self.sender}, "
            f"message: {self.text}, "
            f"time_created: {self.timestamp}"
        )
