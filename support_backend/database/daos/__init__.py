"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

The `daos` package encapsulates all interactions with the SQLAlchemy ORM
entities, providing CRUD APIs for the store while hiding query details.

Conventions
-----------
- SQLAlchemy 2.0 typed mappings (Mapped[...] / mapped_column)
- Session lifecycle (open/commit/rollback) is handled by callers
- DAOs surface exceptions so upper layers decide error policy

Contents
--------
- ConversationDao
    * Creates conversations
    * Fetches a conversation by id
    * Updates the `updated_at` timestamp

- MessagesDao
    * Creates messages within a conversation
    * Fetches all messages of a conversation (chronological order)
    * Fetches the N most recent messages (chronological order)
"""
