"""
Entities Package — SQLAlchemy 2.0 ORM Models (SQLite + ISO-8601 timestamps)
===========================================================================

The `entities` package defines the ORM models of the support backend, mapping
database tables to Python classes using SQLAlchemy 2.0-typed mappings. These
classes are consumed by DAOs (`daos` package) and returned by the store.

Contents
--------
- Conversation
    One support dialogue thread.
    * Fields: `id` (text PK, the session id), `created_at`, `updated_at`,
      `metadata` (opaque, optional)

- Message
    One stored turn within a conversation.
    * Fields: `id` (text PK), `conversation_id` (FK → conversations.id),
      `sender` ("user" | "ai"), `text`, `timestamp`
    * Indexed on `conversation_id` and `timestamp`

- Sender
    Enum of the two message authors.
"""

from support_backend.database.entities.conversations import Conversation
from support_backend.database.entities.messages import Message, Sender

__all__ = ["Conversation", "Message", "Sender"]
