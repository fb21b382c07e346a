"""Atomic unit of work shared by the ledger mutations.

A unit of work holds the in-process locks of every affected site (ascending
site order), opens one database transaction, takes the summary row locks in
the same order, and publishes change events only after the commit.
"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from sqlalchemy.engine import Connection

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_store import SummaryRepositoryPort
from src.application.ports.locking import SiteLockPort
from src.application.ports.notifier import ChangeNotifierPort
from src.domain.models import SummaryChanged


class LedgerSession:
    """Connection plus recompute hook handed to a mutation."""

    def __init__(self, conn: Connection, aggregator) -> None:
        self.conn = conn
        self._aggregator = aggregator
        self.events: list[SummaryChanged] = []

    def recompute(self, site_ids: Iterable[str]) -> list[SummaryChanged]:
        """Recompute the given sites inside this unit of work.

        Args:
            site_ids: Sites whose summaries must be rebuilt.

        Returns:
            list[SummaryChanged]: Events for summaries whose figures changed.
        """
        events = self._aggregator.recompute_many(self.conn, site_ids)
        self.events.extend(events)
        return events


class LedgerUnitOfWork:
    """Factory of atomic ledger sessions."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        aggregator,
        summaries: SummaryRepositoryPort,
        locks: SiteLockPort,
        notifier: ChangeNotifierPort,
    ) -> None:
        """Initialize the unit of work.

        Args:
            db_port: Port providing access to the ledger engine.
            aggregator: LedgerAggregator rebuilding summaries.
            summaries: Repository holding the summary rows.
            locks: Per-site lock registry.
            notifier: Notifier receiving events after commit.
        """
        self._db_port = db_port
        self._aggregator = aggregator
        self._summaries = summaries
        self._locks = locks
        self._notifier = notifier

    @contextmanager
    def mutate(self, site_ids: Iterable[str]) -> Iterator[LedgerSession]:
        """Run a mutation touching the given sites atomically.

        Any exception raised inside the block rolls the whole transaction
        back and no event is published.

        Args:
            site_ids: Every site the mutation may write or recompute.

        Yields:
            LedgerSession: Session bound to the open transaction.
        """
        ordered = sorted(set(site_ids))
        engine = self._db_port.get_ledger_engine()
        with self._locks.hold(ordered):
            with engine.begin() as conn:
                self._summaries.lock_summaries(conn, ordered)
                session = LedgerSession(conn, self._aggregator)
                yield session
            self._notifier.publish_all(session.events)

    @contextmanager
    def read(self) -> Iterator[Connection]:
        """Open a read-only connection on the ledger database."""
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            yield conn


__all__ = ["LedgerSession", "LedgerUnitOfWork"]
