"""
The `helpers` package provides utility functions and decorators
that support database operations.

Contents
--------
- transactionManagement
    Provides tools for database transaction management:
        - Context variable (`db_session_context`) for propagating the active session across nested store calls
        - `@transactional` decorator for wrapping store methods in a managed transaction:
            - Reuses an existing session if one is active in context
            - Creates, commits, and closes a new session otherwise
            - Rolls back the session on errors and reports SQLAlchemy failures as `StorageError`
"""
