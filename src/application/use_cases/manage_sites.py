"""Site lifecycle use cases.

A site owns exactly one summary: it is created zeroed with the site and
removed only when the site is deleted.
"""

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.ledger_store import (
    SiteRepositoryPort,
    SummaryRepositoryPort,
    TransactionStorePort,
)
from src.application.use_cases.record_transaction import new_record_id
from src.application.use_cases.unit_of_work import LedgerUnitOfWork
from src.domain.errors import LedgerError, NotFoundError, ValidationError
from src.domain.models import Site
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.utils.utils import utc_now

MAX_DELETE_ATTEMPTS = 3


class CreateSiteUseCase:
    """Register a site together with its zeroed summary."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
        logger=None,
        audit_logger=None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_record_id,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of atomic ledger sessions.
            sites: Port writing site records.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger receiving the mutation audit trail.
            clock: Callable returning the creation timestamp.
            id_factory: Callable returning new site identifiers.
        """
        self._unit_of_work = unit_of_work
        self._sites = sites
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_usage_logger()
        self._clock = clock
        self._id_factory = id_factory

    def execute(
        self,
        name: str,
        location: str | None = None,
        supervisor_id: str | None = None,
        *,
        site_id: str | None = None,
    ) -> Site:
        """Create the site and its summary in one unit of work.

        Args:
            name: Display name, must not be blank.
            location: Optional location label.
            supervisor_id: Supervisor in charge of the site.
            site_id: Optional explicit identifier.

        Returns:
            Site: The stored site.

        Raises:
            ValidationError: If the name is blank or the id already exists.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Site name must not be empty")
        site = Site(
            id=site_id or self._id_factory(),
            name=name.strip(),
            location=location,
            supervisor_id=supervisor_id,
            is_completed=False,
            created_at=self._clock(),
        )
        try:
            with self._unit_of_work.mutate([site.id]) as session:
                if self._sites.fetch_site(session.conn, site.id) is not None:
                    raise ValidationError(f"Site already exists: {site.id}")
                self._sites.insert_site(session.conn, site)
                session.recompute([site.id])
        except SQLAlchemyError as exc:
            self._logger.error(f"Failed to create site {site.id}: {exc}")
            raise

        self._audit_logger.info(
            f"created site {site.id} name={site.name} "
            f"supervisor={supervisor_id}"
        )
        return site


class CompleteSiteUseCase:
    """Flag a site as completed."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
        logger=None,
        audit_logger=None,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._sites = sites
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_usage_logger()

    def execute(self, site_id: str) -> None:
        try:
            with self._unit_of_work.mutate([site_id]) as session:
                if not self._sites.mark_completed(session.conn, site_id):
                    raise NotFoundError(f"Unknown site: {site_id}")
        except SQLAlchemyError as exc:
            self._logger.error(f"Failed to complete site {site_id}: {exc}")
            raise
        self._audit_logger.info(f"completed site {site_id}")


class _CounterpartsChanged(LedgerError):
    """Raised when a transfer touched the site between read and lock."""


class DeleteSiteUseCase:
    """Delete a site with its records, then rebalance its counterparts.

    Transfers naming the deleted site disappear with it, so every other site
    that was party to one of them is recomputed in the same unit of work.
    """

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
        store: TransactionStorePort,
        summaries: SummaryRepositoryPort,
        logger=None,
        audit_logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of atomic ledger sessions.
            sites: Port writing site records.
            store: Port reading and purging transactions and transfers.
            summaries: Port removing the summary row.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger receiving the mutation audit trail.
        """
        self._unit_of_work = unit_of_work
        self._sites = sites
        self._store = store
        self._summaries = summaries
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_usage_logger()

    def execute(self, site_id: str) -> list[str]:
        """Delete the site and recompute the sites it exchanged funds with.

        Args:
            site_id: Site to delete.

        Returns:
            list[str]: Counterpart sites that were recomputed.

        Raises:
            NotFoundError: If the site does not exist.
            LedgerError: If concurrent transfers kept changing the set of
                counterpart sites.
        """
        with self._unit_of_work.read() as conn:
            if self._sites.fetch_site(conn, site_id) is None:
                raise NotFoundError(f"Unknown site: {site_id}")
            counterparts = self._counterparts(conn, site_id)

        for attempt in range(1, MAX_DELETE_ATTEMPTS + 1):
            try:
                recomputed = self._delete_locked(site_id, counterparts)
            except _CounterpartsChanged as exc:
                self._logger.info(
                    f"Counterparts of site {site_id} changed "
                    f"(attempt {attempt}); retrying"
                )
                counterparts = exc.args[0]
                continue
            except SQLAlchemyError as exc:
                self._logger.error(f"Failed to delete site {site_id}: {exc}")
                raise
            self._audit_logger.info(
                f"deleted site {site_id} counterparts={recomputed}"
            )
            return recomputed

        raise LedgerError(
            f"Could not lock the counterparts of site {site_id} "
            f"after {MAX_DELETE_ATTEMPTS} attempts"
        )

    def _delete_locked(self, site_id: str, counterparts: set[str]) -> list[str]:
        with self._unit_of_work.mutate([site_id, *counterparts]) as session:
            if self._sites.fetch_site(session.conn, site_id) is None:
                raise NotFoundError(f"Unknown site: {site_id}")
            current = self._counterparts(session.conn, site_id)
            if not current <= counterparts:
                raise _CounterpartsChanged(counterparts | current)
            self._store.purge_site_records(session.conn, site_id)
            self._summaries.delete_summary(session.conn, site_id)
            self._sites.delete_site(session.conn, site_id)
            session.recompute(current)
        return sorted(current)

    def _counterparts(self, conn: Connection, site_id: str) -> set[str]:
        counterparts = set()
        for transfer in self._store.list_active_transfers(conn, site_id):
            counterparts.update(transfer.site_ids)
        counterparts.discard(site_id)
        return counterparts


__all__ = [
    "MAX_DELETE_ATTEMPTS",
    "CreateSiteUseCase",
    "CompleteSiteUseCase",
    "DeleteSiteUseCase",
]
