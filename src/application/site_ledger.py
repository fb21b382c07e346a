"""Single entry point over the site ledger use cases.

``SiteLedger`` wires one aggregator and one unit of work around the given
ports and exposes each operation as a method. Presentation layers and CLIs
talk to this object instead of instantiating use cases themselves.
"""

from collections.abc import Collection, Iterable, Mapping
from datetime import date
from typing import Any, List

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_store import (
    SiteRepositoryPort,
    SummaryRepositoryPort,
    TransactionStorePort,
)
from src.application.ports.locking import SiteLockPort
from src.application.ports.notifier import ChangeNotifierPort, SubscriptionPort
from src.application.use_cases import (
    CompleteSiteUseCase,
    CreateSiteUseCase,
    CreateTransactionUseCase,
    DeleteSiteUseCase,
    DeleteTransactionUseCase,
    DeleteTransferUseCase,
    GetSiteSummaryUseCase,
    GetSiteUseCase,
    LedgerAggregator,
    LedgerUnitOfWork,
    ListSiteSummariesUseCase,
    ListSiteTransactionsUseCase,
    ListSiteTransfersUseCase,
    PostTransferUseCase,
    RecomputeAllResult,
    RecomputeAllSitesUseCase,
    RecomputeSiteUseCase,
    UpdateTransactionStatusUseCase,
    UpdateTransactionUseCase,
    VerifySummariesUseCase,
)
from src.domain.constants import DEFAULT_COUNTED_STATUSES
from src.domain.models import (
    Site,
    SiteFinancialSummary,
    SiteTransaction,
    SummaryDrift,
    SupervisorTransfer,
)
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


class SiteLedger:
    """Facade over transactions, transfers, summaries and notifications."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        sites: SiteRepositoryPort,
        store: TransactionStorePort,
        summaries: SummaryRepositoryPort,
        locks: SiteLockPort,
        notifier: ChangeNotifierPort,
        counted_statuses: Collection[str] = DEFAULT_COUNTED_STATUSES,
        logger=None,
        audit_logger=None,
    ) -> None:
        """Initialize the facade.

        Args:
            db_port: Port providing access to the ledger engine.
            sites: Site repository.
            store: Transaction and transfer store.
            summaries: Summary row repository.
            locks: Per-site lock registry.
            notifier: Change notifier fed after every commit.
            counted_statuses: Transaction statuses counted in summaries.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger receiving the mutation audit trail.
        """
        logger = logger or get_app_logger()
        audit_logger = audit_logger or get_usage_logger()
        self._notifier = notifier
        self._aggregator = LedgerAggregator(
            store,
            summaries,
            counted_statuses=counted_statuses,
            logger=logger,
        )
        unit_of_work = LedgerUnitOfWork(
            db_port,
            self._aggregator,
            summaries,
            locks,
            notifier,
        )
        self._unit_of_work = unit_of_work

        self._create_site = CreateSiteUseCase(
            unit_of_work, sites, logger=logger, audit_logger=audit_logger
        )
        self._complete_site = CompleteSiteUseCase(
            unit_of_work, sites, logger=logger, audit_logger=audit_logger
        )
        self._delete_site = DeleteSiteUseCase(
            unit_of_work,
            sites,
            store,
            summaries,
            logger=logger,
            audit_logger=audit_logger,
        )
        self._get_site = GetSiteUseCase(unit_of_work, sites)
        self._create_transaction = CreateTransactionUseCase(
            unit_of_work, sites, store, logger=logger, audit_logger=audit_logger
        )
        self._delete_transaction = DeleteTransactionUseCase(
            unit_of_work, store, logger=logger, audit_logger=audit_logger
        )
        self._update_transaction = UpdateTransactionUseCase(
            unit_of_work, sites, store, logger=logger, audit_logger=audit_logger
        )
        self._set_status = UpdateTransactionStatusUseCase(
            unit_of_work, store, logger=logger, audit_logger=audit_logger
        )
        self._post_transfer = PostTransferUseCase(
            unit_of_work, sites, store, logger=logger, audit_logger=audit_logger
        )
        self._delete_transfer = DeleteTransferUseCase(
            unit_of_work, store, logger=logger, audit_logger=audit_logger
        )
        self._get_summary = GetSiteSummaryUseCase(unit_of_work, sites, summaries)
        self._list_summaries = ListSiteSummariesUseCase(unit_of_work, summaries)
        self._list_transactions = ListSiteTransactionsUseCase(unit_of_work, store)
        self._list_transfers = ListSiteTransfersUseCase(unit_of_work, store)
        self._recompute_site = RecomputeSiteUseCase(
            unit_of_work, sites, summaries, logger=logger
        )
        self._recompute_all = RecomputeAllSitesUseCase(
            unit_of_work, sites, logger=logger
        )
        self._verify = VerifySummariesUseCase(
            unit_of_work, self._aggregator, sites, summaries, logger=logger
        )

    # Sites

    def create_site(
        self,
        name: str,
        location: str | None = None,
        supervisor_id: str | None = None,
        *,
        site_id: str | None = None,
    ) -> Site:
        return self._create_site.execute(
            name, location, supervisor_id, site_id=site_id
        )

    def complete_site(self, site_id: str) -> None:
        self._complete_site.execute(site_id)

    def delete_site(self, site_id: str) -> list[str]:
        return self._delete_site.execute(site_id)

    def get_site(self, site_id: str) -> Site:
        return self._get_site.execute(site_id)

    # Transactions

    def create_transaction(
        self,
        kind: str,
        site_id: str,
        amount: Any,
        metadata: Mapping[str, Any] | None = None,
        *,
        status: str = "pending",
        created_by: str | None = None,
        occurred_on: date | str | None = None,
    ) -> str:
        return self._create_transaction.execute(
            kind,
            site_id,
            amount,
            metadata,
            status=status,
            created_by=created_by,
            occurred_on=occurred_on,
        )

    def delete_transaction(
        self,
        transaction_id: str,
        *,
        deleted_by: str | None = None,
    ) -> None:
        self._delete_transaction.execute(transaction_id, deleted_by=deleted_by)

    def update_transaction(
        self,
        transaction_id: str,
        *,
        amount: Any = None,
        metadata: Mapping[str, Any] | None = None,
        site_id: str | None = None,
        occurred_on: date | str | None = None,
        changed_by: str | None = None,
    ) -> SiteTransaction:
        return self._update_transaction.execute(
            transaction_id,
            amount=amount,
            metadata=metadata,
            site_id=site_id,
            occurred_on=occurred_on,
            changed_by=changed_by,
        )

    def set_transaction_status(
        self,
        transaction_id: str,
        status: str,
        *,
        changed_by: str | None = None,
    ) -> None:
        self._set_status.execute(transaction_id, status, changed_by=changed_by)

    def list_transactions(
        self,
        site_id: str,
        kind: str | None = None,
    ) -> List[SiteTransaction]:
        return self._list_transactions.execute(site_id, kind)

    # Transfers

    def post_transfer(
        self,
        payer_site_id: str,
        receiver_site_id: str,
        amount: Any,
        transfer_kind: str,
        *,
        payer_supervisor_id: str | None = None,
        receiver_supervisor_id: str | None = None,
        created_by: str | None = None,
        occurred_on: date | str | None = None,
    ) -> str:
        return self._post_transfer.execute(
            payer_site_id,
            receiver_site_id,
            amount,
            transfer_kind,
            payer_supervisor_id=payer_supervisor_id,
            receiver_supervisor_id=receiver_supervisor_id,
            created_by=created_by,
            occurred_on=occurred_on,
        )

    def delete_transfer(
        self,
        transfer_id: str,
        *,
        deleted_by: str | None = None,
    ) -> None:
        self._delete_transfer.execute(transfer_id, deleted_by=deleted_by)

    def list_transfers(self, site_id: str) -> List[SupervisorTransfer]:
        return self._list_transfers.execute(site_id)

    # Summaries

    def get_summary(self, site_id: str) -> SiteFinancialSummary:
        return self._get_summary.execute(site_id)

    def list_summaries(self) -> List[SiteFinancialSummary]:
        return self._list_summaries.execute()

    def recompute_site(self, site_id: str) -> SiteFinancialSummary:
        return self._recompute_site.execute(site_id)

    def recompute_all(
        self,
        site_ids: Iterable[str] | None = None,
    ) -> RecomputeAllResult:
        return self._recompute_all.execute(site_ids)

    def verify_summaries(
        self,
        site_ids: Iterable[str] | None = None,
    ) -> List[SummaryDrift]:
        return self._verify.execute(site_ids)

    def subscribe(self, site_id: str) -> SubscriptionPort:
        """Return a stream of change events for the site.

        Events only carry the site and the new revision; call
        ``get_summary`` to read the figures.
        """
        return self._notifier.subscribe(site_id)


__all__ = ["SiteLedger"]
