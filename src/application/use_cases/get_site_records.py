"""Use cases reading sites and their active records."""

from typing import List

from src.application.ports.ledger_store import (
    SiteRepositoryPort,
    TransactionStorePort,
)
from src.application.use_cases.unit_of_work import LedgerUnitOfWork
from src.domain.errors import NotFoundError
from src.domain.models import Site, SiteTransaction, SupervisorTransfer


class GetSiteUseCase:
    """Fetch one site record."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
    ) -> None:
        """Initialize the use case with its required dependencies."""
        self._unit_of_work = unit_of_work
        self._sites = sites

    def execute(self, site_id: str) -> Site:
        with self._unit_of_work.read() as conn:
            site = self._sites.fetch_site(conn, site_id)
        if site is None:
            raise NotFoundError(f"Unknown site: {site_id}")
        return site


class ListSiteTransactionsUseCase:
    """List the active transactions of a site, oldest first."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        store: TransactionStorePort,
    ) -> None:
        """Initialize the use case with its required dependencies."""
        self._unit_of_work = unit_of_work
        self._store = store

    def execute(
        self,
        site_id: str,
        kind: str | None = None,
    ) -> List[SiteTransaction]:
        """Return active transactions, optionally restricted to one kind.

        Args:
            site_id: Site whose records are listed.
            kind: Optional transaction kind filter.

        Returns:
            List[SiteTransaction]: Active records ordered by business date.
        """
        with self._unit_of_work.read() as conn:
            records = self._store.list_active_transactions(conn, site_id)
        if kind is None:
            return records
        return [record for record in records if record.kind.value == kind]


class ListSiteTransfersUseCase:
    """List the active transfers a site paid or received."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        store: TransactionStorePort,
    ) -> None:
        """Initialize the use case with its required dependencies."""
        self._unit_of_work = unit_of_work
        self._store = store

    def execute(self, site_id: str) -> List[SupervisorTransfer]:
        with self._unit_of_work.read() as conn:
            return self._store.list_active_transfers(conn, site_id)


__all__ = [
    "GetSiteUseCase",
    "ListSiteTransactionsUseCase",
    "ListSiteTransfersUseCase",
]
