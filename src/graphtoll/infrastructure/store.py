"""Store — repository handle with transaction coordination.

The Store is the single dependency injected into every service. It owns
the database engine and the per-graph locks. It is constructed once by the
process entry point (CLI ``AppContext`` or a test fixture), which also
owns its lifecycle via :meth:`close`.

:meth:`transaction` yields a :class:`StoreTransaction` exposing one
repository per table, all bound to the same connection. Writes commit
together when the block exits normally and roll back together when it
raises.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from graphtoll.infrastructure.database.engine import init_database
from graphtoll.infrastructure.locks import KeyedLock
from graphtoll.infrastructure.repositories import (
    AccountRepository,
    GraphRepository,
    TripRepository,
    WeightRequestRepository,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from graphtoll.config.settings import GraphtollSettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# StoreTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction with one repository per table on a shared connection."""

    conn: Connection
    accounts: AccountRepository = field(init=False)
    graphs: GraphRepository = field(init=False)
    requests: WeightRequestRepository = field(init=False)
    trips: TripRepository = field(init=False)

    def __post_init__(self) -> None:
        self.accounts = AccountRepository(self.conn)
        self.graphs = GraphRepository(self.conn)
        self.requests = WeightRequestRepository(self.conn)
        self.trips = TripRepository(self.conn)


# ---------------------------------------------------------------------------
# Store — the repository handle
# ---------------------------------------------------------------------------


class Store:
    """Repository handle encapsulating database access and write serialization."""

    def __init__(self, settings: GraphtollSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            settings.db_path,
            busy_timeout=settings.store.busy_timeout,
        )
        self._graph_locks = KeyedLock()

    @property
    def db_path(self) -> Path:
        """Location of the SQLite database file."""
        return self._settings.db_path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> GraphtollSettings:
        """The resolved settings for this store."""
        return self._settings

    @property
    def graph_locks(self) -> KeyedLock:
        """Per-graph locks serializing read-modify-write on edge weights.

        Acquire the graph lock *before* opening a transaction, never the
        other way round.
        """
        return self._graph_locks

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Atomic unit of work across all tables.

        Usage::

            with store.transaction() as txn:
                txn.accounts.debit(owner, cost, now=now)
                txn.graphs.insert(graph_id, ...)
                # Both commit on success, both roll back on failure.
        """
        with self._engine.begin() as conn:
            yield StoreTransaction(conn=conn)

    def close(self) -> None:
        """Release all pooled connections."""
        logger.debug("Closing store at %s", self.db_path)
        self._engine.dispose()
