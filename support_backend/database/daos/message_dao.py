"""
Messages DAO

Purpose
-------
Data-access layer for the `Message` ORM entity. Provides:
- Message creation
- Full retrieval by conversation (chronological)
- Bounded retrieval of the most recent messages (chronological)

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Keeps business rules (validation, sanitization) in higher layers.
- Recent-message retrieval uses a subquery for "latest-first, limited, then
  re-ordered ascending" semantics, so the window always holds the newest turns
  but is returned oldest-first, ready to be used as model context.

Entity (expected columns)
-------------------------
Message:
- id: text primary key
- conversation_id: text (FK to conversations)
- sender: "user" | "ai"
- text: str
- timestamp: ISO-8601 str
"""

import logging
from typing import List

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session, aliased

from support_backend.database.entities.messages import Message

logger = logging.getLogger(__name__)


class MessagesDao:
    """
    Data Access Object (DAO) for conversation messages.
    """

    def createMessage(self, session: Session, message: Message) -> Message:
        """
        Stage a new message record.

        Raises
        ------
        sqlalchemy.exc.IntegrityError
            On duplicate id, unknown conversation, or an invalid sender.
        """
        try:
            session.add(message)
            session.flush()
            return message
        except Exception:
            logger.error("MessagesDao.createMessage failed for conversation=%s", message.conversation_id)
            raise

    def fetchMessagesByConversationId(self, session: Session, conversation_id: str) -> List[Message]:
        """
        Fetch all messages in a conversation, ordered by timestamp (ascending).
        """
        return (
            session.query(Message)
            .filter(Message.conversation_id == conversation_id)
            .order_by(asc(Message.timestamp))
            .all()
        )

    def fetchRecentMessagesByConversationId(
        self, session: Session, conversation_id: str, limit: int
    ) -> List[Message]:
        """
        Fetch the `limit` most recent messages of a conversation, oldest first.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        conversation_id : str
            Unique identifier of the conversation.
        limit : int
            Maximum number of messages returned.

        Returns
        -------
        list[Message]
            At most `limit` messages in ascending timestamp order.
        """
        subq = (
            session.query(Message)
            .filter(Message.conversation_id == conversation_id)
            .order_by(desc(Message.timestamp))
            .limit(limit)
        ).subquery()

        recentMessages = aliased(Message, subq)

        return (
            session.query(recentMessages)
            .order_by(asc(recentMessages.timestamp))
            .all()
        )
