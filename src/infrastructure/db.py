"""Database infrastructure for the site ledger.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the ledger database. It belongs to the infrastructure
layer because it deals with external systems (PostgreSQL in production,
SQLite for local runs and tests).
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from src.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    # Let SQLAlchemy emit BEGIN itself instead of the pysqlite driver.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_sqlite_immediate(conn) -> None:
    # Take the writer lock up front so the recompute reads a stable snapshot.
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine for the ledger database.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance. Server databases get a small
        connection pool with health checks; SQLite gets foreign keys enabled
        and immediate transactions on every connection.
    """
    if db_url.startswith("sqlite"):
        engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False, "timeout": 30},
            future=True,
        )
        event.listen(engine, "connect", _configure_sqlite_connection)
        event.listen(engine, "begin", _begin_sqlite_immediate)
        return engine
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_ledger_engine: Optional[Engine] = None


def get_ledger_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the ledger database.

    Returns:
        Engine: Lazily initialized engine connected to the ledger database.
    """
    global _ledger_engine
    if _ledger_engine is None:
        db_url = _get_env_var("LEDGER_DB_URL")
        _ledger_engine = _create_engine(db_url)
    return _ledger_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by SQLAlchemy engines.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so application use cases can depend only on the protocol.
    An explicit URL bypasses the environment and the process-wide singleton.
    """

    def __init__(self, db_url: str | None = None) -> None:
        self._engine = _create_engine(db_url) if db_url else None

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the ledger database.

        Returns:
            Engine: SQLAlchemy engine connected to the ledger database.
        """
        if self._engine is not None:
            return self._engine
        return get_ledger_engine()


__all__ = [
    "get_ledger_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
