"""
Conversation DAO

Purpose
-------
Provides a thin data-access layer for the `Conversation` ORM entity:
- Create conversations
- Point lookup by id
- Update `updated_at`

Design
------
- Requires an active SQLAlchemy `Session` supplied by the caller (no session
  creation inside the DAO). Transaction boundaries live in `ChatStore`, whose
  methods are wrapped by `@transactional`.
- Nothing here commits; the surrounding transaction does.

Usage
-----
.. code-block:: python

    from sqlalchemy.orm import Session
    from support_backend.database.entities.conversations import Conversation
    from support_backend.database.daos.conversation_dao import ConversationDao

    dao = ConversationDao()
    with Session(engine) as session:
        conv = Conversation(conversation_id=..., created_at=now, updated_at=now)
        dao.createConversation(session, conv)
        session.commit()

        dao.fetchConversationById(session, conv.id)
        dao.updateConversationTimestamp(session, conversation_id=conv.id, timestamp=later)

Error Handling
--------------
- Methods log the failing operation and re-raise; the store converts
  SQLAlchemy errors into `StorageError`.
- `updateConversationTimestamp` uses `.one()`, which raises `NoResultFound`
  if the conversation does not exist.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from support_backend.database.entities.conversations import Conversation

logger = logging.getLogger(__name__)


class ConversationDao:
    """
    Data Access Object (DAO) for managing Conversation entities.
    """

    def createConversation(self, session: Session, conversation: Conversation) -> Conversation:
        """
        Stage a new conversation record and flush it so key violations surface here.

        Raises
        ------
        sqlalchemy.exc.IntegrityError
            If a conversation with the same id already exists.
        """
        try:
            session.add(conversation)
            session.flush()
            return conversation
        except Exception:
            logger.error("ConversationDao.createConversation failed for id=%s", conversation.id)
            raise

    def fetchConversationById(self, session: Session, conversation_id: str) -> Optional[Conversation]:
        """Return the conversation with the given id, or None."""
        return session.get(Conversation, conversation_id)

    def updateConversationTimestamp(self, session: Session, conversation_id: str, timestamp: str) -> None:
        """
        Update the last updated timestamp of a conversation.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        conversation_id : str
            Unique identifier of the conversation.
        timestamp : str
            New ISO-8601 timestamp.
        """
        try:
            conversation = (
                session.query(Conversation).filter(Conversation.id == conversation_id).one()
            )
            conversation.updated_at = timestamp
        except Exception:
            logger.error("ConversationDao.updateConversationTimestamp failed for id=%s", conversation_id)
            raise
