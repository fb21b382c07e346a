"""Application use cases package."""

from .unit_of_work import LedgerSession, LedgerUnitOfWork
from .recompute_site import (
    LedgerAggregator,
    RecomputeAllResult,
    RecomputeSiteUseCase,
    RecomputeAllSitesUseCase,
)
from .record_transaction import (
    CreateTransactionUseCase,
    DeleteTransactionUseCase,
    UpdateTransactionStatusUseCase,
    UpdateTransactionUseCase,
)
from .post_transfer import PostTransferUseCase, DeleteTransferUseCase
from .manage_sites import (
    CreateSiteUseCase,
    CompleteSiteUseCase,
    DeleteSiteUseCase,
)
from .get_site_summary import GetSiteSummaryUseCase, ListSiteSummariesUseCase
from .get_site_records import (
    GetSiteUseCase,
    ListSiteTransactionsUseCase,
    ListSiteTransfersUseCase,
)
from .verify_summaries import VerifySummariesUseCase

__all__ = [
    "LedgerSession",
    "LedgerUnitOfWork",
    "LedgerAggregator",
    "RecomputeAllResult",
    "RecomputeSiteUseCase",
    "RecomputeAllSitesUseCase",
    "CreateTransactionUseCase",
    "DeleteTransactionUseCase",
    "UpdateTransactionStatusUseCase",
    "UpdateTransactionUseCase",
    "PostTransferUseCase",
    "DeleteTransferUseCase",
    "CreateSiteUseCase",
    "CompleteSiteUseCase",
    "DeleteSiteUseCase",
    "GetSiteSummaryUseCase",
    "ListSiteSummariesUseCase",
    "GetSiteUseCase",
    "ListSiteTransactionsUseCase",
    "ListSiteTransfersUseCase",
    "VerifySummariesUseCase",
]
