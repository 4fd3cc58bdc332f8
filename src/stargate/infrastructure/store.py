"""Store — repository coordination with transactional units of work.

The Store is the single dependency injected into every service. It owns
the database engine and the plugin manager. :meth:`Store.transaction`
yields the three repositories bound to one connection:

- **DB**: One SQLAlchemy connection per unit, with ``conn.begin()`` auto-commit/rollback.
- **Locking**: Write units open with ``BEGIN IMMEDIATE`` so concurrent
  writers serialize for the whole unit of work. Read units
  (``write=False``) open a deferred ``BEGIN`` and never wait on a writer.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from stargate.infrastructure.database.engine import READ_ONLY_OPTION, init_database
from stargate.infrastructure.repositories import (
    DetailRepository,
    DutyRepository,
    PersonRepository,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from stargate.config.settings import StargateSettings
    from stargate.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass
class StoreTransaction:
    """Active unit of work: one connection, three repositories."""

    conn: Connection
    people: PersonRepository
    duties: DutyRepository
    details: DetailRepository

    @classmethod
    def bind(cls, conn: Connection) -> StoreTransaction:
        return cls(
            conn=conn,
            people=PersonRepository(conn),
            duties=DutyRepository(conn),
            details=DetailRepository(conn),
        )


class Store:
    """Repository encapsulating database access and observer hooks.

    Constructed once at CLI startup from :class:`StargateSettings` and
    stored on the click context. Services receive the Store via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: StargateSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            settings.database_path,
            timeout=settings.database.timeout,
        )
        self._plugins: PluginManager | None = None

    @property
    def database_path(self) -> Path:
        return self._settings.database_path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> StargateSettings:
        return self._settings

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None if not initialized)."""
        return self._plugins

    def init_plugins(self) -> None:
        """Create the plugin manager and load entry-point plugins if enabled.

        Called by AppContext when the store is first accessed.
        """
        from stargate.plugins.manager import PluginManager

        pm = PluginManager()
        if self._settings.plugins.enabled:
            pm.discover_and_load()
        self._plugins = pm

    @contextmanager
    def transaction(self, *, write: bool = True) -> Iterator[StoreTransaction]:
        """One atomic unit of work across the three repositories.

        Commits when the block exits normally. Any exception rolls the
        whole unit back and propagates unchanged. Pass ``write=False`` for
        lookups: the unit then reads a snapshot without taking the write lock.

        Usage::

            with store.transaction() as txn:
                person = txn.people.find_by_name("Jane")
                txn.duties.insert(...)
        """
        with self._engine.connect() as conn:
            if not write:
                conn.execution_options(**{READ_ONLY_OPTION: True})
            with conn.begin():
                yield StoreTransaction.bind(conn)

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
        logger.debug("Store closed: %s", self.database_path)
