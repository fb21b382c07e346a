"""Domain package for business rules and core models."""

from .constants import (
    AdvancePurpose,
    InvoiceApprover,
    InvoicePaymentStatus,
    TransactionKind,
    TransactionStatus,
    TransferKind,
)
from .errors import LedgerError, NotFoundError, RecomputeError, ValidationError
from .models import (
    Site,
    SiteFinancialSummary,
    SiteTransaction,
    SummaryChanged,
    SummaryDrift,
    SupervisorTransfer,
)
from .services import compute_balance, compute_site_summary

__all__ = [
    "AdvancePurpose",
    "InvoiceApprover",
    "InvoicePaymentStatus",
    "TransactionKind",
    "TransactionStatus",
    "TransferKind",
    "LedgerError",
    "NotFoundError",
    "RecomputeError",
    "ValidationError",
    "Site",
    "SiteFinancialSummary",
    "SiteTransaction",
    "SummaryChanged",
    "SummaryDrift",
    "SupervisorTransfer",
    "compute_balance",
    "compute_site_summary",
]
