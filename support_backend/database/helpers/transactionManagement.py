"""
Database Transaction Management
===============================

This module provides utilities for managing SQLAlchemy database sessions
using Python context variables and a decorator-based transaction wrapper.

It allows seamless propagation of a database session across nested store
calls without explicitly threading it through arguments. Store methods
decorated with ``@transactional`` run inside a managed transactional context.

Key features
~~~~~~~~~~~~
- Context variable to store the active session
- Implicit reuse of an existing session by nested calls (one commit)
- Automatic commit and rollback handling
- SQLAlchemy failures surfaced as ``StorageError``
- Clean session closure after execution

"""

import contextvars
import logging
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError

from support_backend.exceptions import StorageError

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------
# Context variable to store the current database session.
# --------------------------------------------------------------------
db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""


def transactional(func):
    """
    Decorator to wrap store methods in a managed SQLAlchemy transaction.

    Ensures that:
    - If a session already exists in context, it is reused.
    - Otherwise, a new session is opened from ``self.session_factory``,
      committed, and closed.
    - On errors, the session is rolled back and closed; SQLAlchemy errors
      are re-raised as ``StorageError``.

    Parameters
    ----------
    func : callable
        The method to wrap. It must accept a `session` keyword argument.

    Example
    -------
    >>> class Store:
    ...     @transactional
    ...     def add(self, row, session=None):
    ...         session.add(row)
    ...         return row
    """
    @wraps(func)
    def wrap_func(self, *args, **kwargs):
        session = db_session_context.get()
        if session is not None:
            return func(self, *args, session=session, **kwargs)

        # Raises if the store was never initialized
        session = self.session_factory()
        token = db_session_context.set(session)

        try:
            result = func(self, *args, session=session, **kwargs)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("%s failed: %s", func.__qualname__, e)
            raise StorageError(f"Storage operation failed: {func.__name__}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
