"""
The `database` package is responsible for all interactions with the application's database.
It provides configuration, entity definitions, data access objects, and the store object
that the chat service talks to.

Contents:
    - config:
        Application settings and the SQLAlchemy engine / declarative base
        used to reach the SQLite file.

    - entities:
        SQLAlchemy entity models for the `conversations` and `messages` tables.

    - daos:
        Data Access Objects (DAOs) providing insert and query operations for the entities.

    - core:
        `ChatStore`, the explicitly constructed store that owns the engine lifecycle
        and exposes the conversation/message operations.

    - helpers:
        The `@transactional` decorator managing sessions, commits and rollbacks.
"""
