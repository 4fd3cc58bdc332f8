"""Database engine setup for SQLite with WAL mode.

SQLAlchemy Core (not ORM) is used: every service call is one short unit
of work, so there is no benefit from session management or identity maps.

Write transactions open with ``BEGIN IMMEDIATE``. The SQLite write lock
is taken before the first read, so a read-check-write sequence (duplicate
check, close current duty, insert new duty) cannot interleave with
another writer. A second writer waits up to ``timeout`` seconds.

A connection carrying the :data:`READ_ONLY_OPTION` execution option opens
a plain deferred ``BEGIN`` instead. Under WAL it reads a consistent
snapshot without waiting on an active writer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine

from stargate.infrastructure.database.schema import metadata

READ_ONLY_OPTION = "stargate_read_only"


def create_db_engine(db_path: Path, *, timeout: float = 5.0) -> Engine:
    """Create a SQLite engine with WAL mode, foreign keys, and immediate write transactions."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"timeout": timeout},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Disable pysqlite's implicit BEGIN; the "begin" listener emits it.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Connection) -> None:
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(db_path: Path, *, timeout: float = 5.0) -> Engine:
    """Initialize the stargate database at *db_path*.

    Creates the parent directory and all tables from :data:`schema.metadata`.
    Idempotent: safe to call on an existing database.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, timeout=timeout)
    metadata.create_all(engine)
    return engine
