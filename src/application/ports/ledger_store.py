"""Ports for ledger persistence.

Every method receives the SQLAlchemy connection of the caller's unit of
work, so a record write and the summary recompute it triggers commit or
roll back together.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from sqlalchemy.engine import Connection

from src.domain.constants import TransactionStatus
from src.domain.models import (
    Site,
    SiteFinancialSummary,
    SiteTransaction,
    SupervisorTransfer,
)


class SiteRepositoryPort(Protocol):
    """Port exposing site records."""

    def insert_site(self, conn: Connection, site: Site) -> None:
        """Persist a new site."""

    def fetch_site(self, conn: Connection, site_id: str) -> Site | None:
        """Return the site, or None when it does not exist."""

    def fetch_site_ids(self, conn: Connection) -> list[str]:
        """Return all site identifiers in ascending order."""

    def mark_completed(self, conn: Connection, site_id: str) -> bool:
        """Flag the site as completed; False when it does not exist."""

    def delete_site(self, conn: Connection, site_id: str) -> bool:
        """Remove the site row; False when it does not exist."""


class TransactionStorePort(Protocol):
    """Port exposing transaction and supervisor transfer records."""

    def insert_transaction(
        self,
        conn: Connection,
        record: SiteTransaction,
    ) -> None:
        """Persist a new site transaction."""

    def fetch_transaction(
        self,
        conn: Connection,
        transaction_id: str,
    ) -> SiteTransaction | None:
        """Return a transaction (active or deleted), or None."""

    def mark_transaction_deleted(
        self,
        conn: Connection,
        transaction_id: str,
        deleted_at: datetime,
    ) -> bool:
        """Soft-delete an active transaction; False when none matched."""

    def update_transaction_status(
        self,
        conn: Connection,
        transaction_id: str,
        status: TransactionStatus,
    ) -> bool:
        """Change the status of an active transaction."""

    def update_transaction(
        self,
        conn: Connection,
        record: SiteTransaction,
    ) -> bool:
        """Rewrite site, amount, date and metadata of an active transaction."""

    def list_active_transactions(
        self,
        conn: Connection,
        site_id: str,
    ) -> list[SiteTransaction]:
        """Return the active transactions of a site."""

    def insert_transfer(
        self,
        conn: Connection,
        transfer: SupervisorTransfer,
    ) -> None:
        """Persist a new supervisor transfer."""

    def fetch_transfer(
        self,
        conn: Connection,
        transfer_id: str,
    ) -> SupervisorTransfer | None:
        """Return a transfer (active or deleted), or None."""

    def mark_transfer_deleted(
        self,
        conn: Connection,
        transfer_id: str,
        deleted_at: datetime,
    ) -> bool:
        """Soft-delete an active transfer; False when none matched."""

    def list_active_transfers(
        self,
        conn: Connection,
        site_id: str,
    ) -> list[SupervisorTransfer]:
        """Return active transfers naming the site as payer or receiver."""

    def purge_site_records(self, conn: Connection, site_id: str) -> None:
        """Remove every transaction and transfer that names the site."""


class SummaryRepositoryPort(Protocol):
    """Port exposing the per-site summary rows."""

    def lock_summaries(
        self,
        conn: Connection,
        site_ids: Iterable[str],
    ) -> None:
        """Take row locks on the summaries in ascending site order."""

    def fetch_summary(
        self,
        conn: Connection,
        site_id: str,
    ) -> SiteFinancialSummary | None:
        """Return the stored summary, or None."""

    def fetch_summaries(self, conn: Connection) -> list[SiteFinancialSummary]:
        """Return all stored summaries ordered by site."""

    def upsert_summary(
        self,
        conn: Connection,
        summary: SiteFinancialSummary,
    ) -> None:
        """Insert or replace the summary row of a site."""

    def delete_summary(self, conn: Connection, site_id: str) -> None:
        """Remove the summary row of a site."""


__all__ = [
    "SiteRepositoryPort",
    "TransactionStorePort",
    "SummaryRepositoryPort",
]
