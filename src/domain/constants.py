"""Domain constants for site ledgers."""

from enum import Enum


class TransactionKind(str, Enum):
    """Closed set of per-site transaction kinds."""

    EXPENSE = "expense"
    ADVANCE = "advance"
    FUNDS_RECEIVED = "funds_received"
    INVOICE = "invoice"


class TransactionStatus(str, Enum):
    """Approval status carried by site transactions."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TransferKind(str, Enum):
    """Which party recorded a supervisor-to-supervisor transfer."""

    ADVANCE_PAID = "advance_paid"
    FUNDS_RECEIVED = "funds_received"


class AdvancePurpose(str, Enum):
    """Purpose of a cash advance.

    Only ``advance`` reduces the site balance; the other purposes are
    recoverable from the worker and tracked as debit to worker.
    """

    ADVANCE = "advance"
    SAFETY_SHOES = "safety_shoes"
    TOOLS = "tools"
    OTHER = "other"


class InvoicePaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class InvoiceApprover(str, Enum):
    """Who settles an invoice: the site supervisor or the head office."""

    SUPERVISOR = "supervisor"
    HEAD_OFFICE = "ho"


DEFAULT_COUNTED_STATUSES = frozenset(status.value for status in TransactionStatus)

DEBIT_TO_WORKER_PURPOSES = frozenset(
    {
        AdvancePurpose.SAFETY_SHOES.value,
        AdvancePurpose.TOOLS.value,
        AdvancePurpose.OTHER.value,
    }
)

PURPOSE_KEY = "purpose"
PAYMENT_STATUS_KEY = "payment_status"
APPROVER_TYPE_KEY = "approver_type"

SUMMARY_FIGURES = (
    "funds_received",
    "funds_received_from_supervisor",
    "total_expenses",
    "total_advances",
    "total_invoices",
    "advance_paid_to_supervisor",
    "debit_to_worker",
    "pending_invoices",
    "balance",
)


__all__ = [
    "TransactionKind",
    "TransactionStatus",
    "TransferKind",
    "AdvancePurpose",
    "InvoicePaymentStatus",
    "InvoiceApprover",
    "DEFAULT_COUNTED_STATUSES",
    "DEBIT_TO_WORKER_PURPOSES",
    "PURPOSE_KEY",
    "PAYMENT_STATUS_KEY",
    "APPROVER_TYPE_KEY",
    "SUMMARY_FIGURES",
]
