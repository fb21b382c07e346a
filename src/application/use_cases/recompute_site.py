"""Ledger aggregation and the explicit repair entry points.

``LedgerAggregator`` is the single writer of site summaries. It always
derives a summary from scratch over the site's active records, so running
it again with no intervening mutation leaves the row untouched, and running
it on a drifted row repairs it.
"""

from collections.abc import Callable, Collection, Iterable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.ledger_store import (
    SiteRepositoryPort,
    SummaryRepositoryPort,
    TransactionStorePort,
)
from src.application.use_cases.unit_of_work import LedgerUnitOfWork
from src.domain.constants import DEFAULT_COUNTED_STATUSES
from src.domain.errors import NotFoundError, RecomputeError
from src.domain.models import SiteFinancialSummary, SummaryChanged
from src.domain.services.aggregation import compute_site_summary
from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import utc_now


class LedgerAggregator:
    """Rebuild site summaries from the transaction store."""

    def __init__(
        self,
        store: TransactionStorePort,
        summaries: SummaryRepositoryPort,
        counted_statuses: Collection[str] = DEFAULT_COUNTED_STATUSES,
        clock: Callable[[], datetime] = utc_now,
        logger=None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            store: Port reading active transactions and transfers.
            summaries: Port holding the summary rows.
            counted_statuses: Transaction statuses counted in the totals.
            clock: Callable returning the write timestamp.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._summaries = summaries
        self._counted_statuses = frozenset(counted_statuses)
        self._clock = clock
        self._logger = logger or get_app_logger()

    def derive(self, conn: Connection, site_id: str) -> SiteFinancialSummary:
        """Return a fresh summary for the site without writing it.

        Args:
            conn: Connection of the current unit of work.
            site_id: Site to summarize.

        Returns:
            SiteFinancialSummary: Figures summed over the active records.
        """
        transactions = self._store.list_active_transactions(conn, site_id)
        transfers = self._store.list_active_transfers(conn, site_id)
        return compute_site_summary(
            site_id,
            transactions,
            transfers,
            counted_statuses=self._counted_statuses,
        )

    def recompute(self, conn: Connection, site_id: str) -> SummaryChanged | None:
        """Derive the site summary and upsert it when a figure changed.

        Args:
            conn: Connection of the unit of work that triggered the call.
            site_id: Site whose summary is rebuilt.

        Returns:
            SummaryChanged | None: Event for the new revision, or None when
            the stored row already held the derived figures.
        """
        derived = self.derive(conn, site_id)
        stored = self._summaries.fetch_summary(conn, site_id)
        if derived.same_figures(stored):
            return None
        revision = (stored.revision if stored else 0) + 1
        summary = SiteFinancialSummary(
            **{
                **derived.figures(),
                "site_id": site_id,
                "revision": revision,
                "updated_at": self._clock(),
            }
        )
        self._summaries.upsert_summary(conn, summary)
        self._logger.debug(
            f"Recomputed site {site_id}: balance={summary.balance} "
            f"revision={revision}"
        )
        return SummaryChanged(site_id=site_id, revision=revision)

    def recompute_many(
        self,
        conn: Connection,
        site_ids: Iterable[str],
    ) -> list[SummaryChanged]:
        """Recompute several sites in ascending site order."""
        events = []
        for site_id in sorted(set(site_ids)):
            event = self.recompute(conn, site_id)
            if event is not None:
                events.append(event)
        return events


@dataclass(frozen=True)
class RecomputeAllResult:
    """Result of a full backfill.

    Attributes:
        site_count: Number of sites visited.
        repaired_site_ids: Sites whose stored summary had to change.
    """

    site_count: int
    repaired_site_ids: list[str]


class RecomputeSiteUseCase:
    """Repair one site summary on demand."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
        summaries: SummaryRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of atomic ledger sessions.
            sites: Port reading site records.
            summaries: Port reading the summary rows.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._unit_of_work = unit_of_work
        self._sites = sites
        self._summaries = summaries
        self._logger = logger or get_app_logger()

    def execute(self, site_id: str) -> SiteFinancialSummary:
        """Rebuild the site summary from scratch.

        Args:
            site_id: Site to repair.

        Returns:
            SiteFinancialSummary: Summary committed after the recompute.

        Raises:
            NotFoundError: If the site does not exist.
            RecomputeError: If the database rejected the recompute.
        """
        try:
            with self._unit_of_work.mutate([site_id]) as session:
                if self._sites.fetch_site(session.conn, site_id) is None:
                    raise NotFoundError(f"Unknown site: {site_id}")
                events = session.recompute([site_id])
                summary = self._summaries.fetch_summary(session.conn, site_id)
        except SQLAlchemyError as exc:
            self._logger.error(f"Recompute failed for site {site_id}: {exc}")
            raise RecomputeError(
                site_id,
                f"Recompute failed for site {site_id}",
            ) from exc
        if events:
            self._logger.warning(
                f"Repaired summary of site {site_id} "
                f"(revision {events[0].revision})"
            )
        else:
            self._logger.info(f"Summary of site {site_id} already consistent")
        return summary


class RecomputeAllSitesUseCase:
    """Backfill every site summary, one atomic unit per site."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of atomic ledger sessions.
            sites: Port listing site records.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._unit_of_work = unit_of_work
        self._sites = sites
        self._logger = logger or get_app_logger()

    def execute(self, site_ids: Iterable[str] | None = None) -> RecomputeAllResult:
        """Recompute the given sites, or all sites when none are given.

        Args:
            site_ids: Optional subset of sites to rebuild.

        Returns:
            RecomputeAllResult: Visited and repaired site counts.

        Raises:
            RecomputeError: On the first site whose recompute failed; sites
                processed before it stay committed.
        """
        if site_ids is None:
            with self._unit_of_work.read() as conn:
                targets = self._sites.fetch_site_ids(conn)
        else:
            targets = sorted(set(site_ids))

        repaired = []
        for site_id in targets:
            try:
                with self._unit_of_work.mutate([site_id]) as session:
                    if self._sites.fetch_site(session.conn, site_id) is None:
                        raise NotFoundError(f"Unknown site: {site_id}")
                    if session.recompute([site_id]):
                        repaired.append(site_id)
            except SQLAlchemyError as exc:
                self._logger.error(f"Recompute failed for site {site_id}: {exc}")
                raise RecomputeError(
                    site_id,
                    f"Recompute failed for site {site_id}",
                ) from exc

        self._logger.info(
            f"Recomputed {len(targets)} sites, repaired {len(repaired)}"
        )
        return RecomputeAllResult(
            site_count=len(targets),
            repaired_site_ids=repaired,
        )


__all__ = [
    "LedgerAggregator",
    "RecomputeAllResult",
    "RecomputeSiteUseCase",
    "RecomputeAllSitesUseCase",
]
