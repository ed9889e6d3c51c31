"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database initialization for the store:
- Builds the SQLite connection URL for the configured file path.
- Creates the Engine (connection pool + SQL execution entry point).
- Defines shared MetaData for table and index objects.
- Exposes a Declarative Base class for ORM models.

Notes
-----
- Engines are built on demand by `ChatStore`; nothing connects at import time.
- `build_memory_engine` keeps a single connection alive (StaticPool), otherwise
  every new connection would see an empty in-memory database.
- All ORM models must inherit from `declarativeBase` to participate in schema
  creation.
"""

from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy.schema import MetaData


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ships with foreign key enforcement off
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def build_file_engine(database_path: str) -> Engine:
    """
    Create an Engine bound to a SQLite file, creating its directory if needed.

    Parameters
    ----------
    database_path : str
        Filesystem path of the database file.

    Returns
    -------
    Engine
        Engine for ``sqlite:///<database_path>``.
    """
    Path(database_path).parent.mkdir(parents=True, exist_ok=True)
    connection_url = URL.create(drivername="sqlite", database=database_path)
    engine = create_engine(connection_url, connect_args={"check_same_thread": False})
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


def build_memory_engine() -> Engine:
    """Create an Engine backed by a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


# --------------------------------------------------------------------
# Metadata object: stores schema-level information about tables,
# constraints, indexes, etc. Shared across all models.
# --------------------------------------------------------------------
metadata = MetaData()
"""
Metadata object: Stores schema-level information about tables, constraints, indexes, etc. Shared across all models.
"""

# --------------------------------------------------------------------
# Declarative Base: root class for ORM models.
# --------------------------------------------------------------------
declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: Root class for ORM models.
All model classes should inherit from this to gain ORM features and automatic schema generation.
"""
