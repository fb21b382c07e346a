"""Domain service deriving a site summary from its ledger records."""

from collections.abc import Collection, Iterable
from datetime import datetime
from decimal import Decimal

from src.domain.constants import (
    APPROVER_TYPE_KEY,
    DEBIT_TO_WORKER_PURPOSES,
    PAYMENT_STATUS_KEY,
    PURPOSE_KEY,
    AdvancePurpose,
    InvoiceApprover,
    InvoicePaymentStatus,
    TransactionKind,
)
from src.domain.models import (
    SiteFinancialSummary,
    SiteTransaction,
    SupervisorTransfer,
)
from src.utils.decimal_utils import to_money


def compute_balance(
    *,
    funds_received: Decimal,
    funds_received_from_supervisor: Decimal,
    total_expenses: Decimal,
    total_advances: Decimal,
    total_invoices: Decimal,
    advance_paid_to_supervisor: Decimal,
) -> Decimal:
    """Return the site balance from its component totals."""
    return to_money(
        funds_received
        + funds_received_from_supervisor
        - total_expenses
        - total_advances
        - total_invoices
        - advance_paid_to_supervisor
    )


def compute_site_summary(
    site_id: str,
    transactions: Iterable[SiteTransaction],
    transfers: Iterable[SupervisorTransfer],
    *,
    counted_statuses: Collection[str],
    revision: int = 0,
    updated_at: datetime | None = None,
) -> SiteFinancialSummary:
    """Sum a site's active records into a fresh summary.

    The derivation never starts from a stored row, so running it twice over
    the same records yields the same figures regardless of record order.

    Args:
        site_id: Site being summarized.
        transactions: Site transactions; inactive ones and those of other
            sites are ignored.
        transfers: Supervisor transfers naming the site as payer or receiver.
        counted_statuses: Transaction statuses that count toward the totals.
        revision: Revision to stamp on the returned summary.
        updated_at: Timestamp to stamp on the returned summary.

    Returns:
        SiteFinancialSummary: Derived totals and balance.
    """
    totals = {
        "funds_received": Decimal("0"),
        "funds_received_from_supervisor": Decimal("0"),
        "total_expenses": Decimal("0"),
        "total_advances": Decimal("0"),
        "total_invoices": Decimal("0"),
        "advance_paid_to_supervisor": Decimal("0"),
        "debit_to_worker": Decimal("0"),
        "pending_invoices": Decimal("0"),
    }

    for record in transactions:
        if record.site_id != site_id or not record.is_active:
            continue
        if record.status.value not in counted_statuses:
            continue
        field = _transaction_field(record)
        if field is not None:
            totals[field] += record.amount

    for transfer in transfers:
        if not transfer.is_active:
            continue
        if transfer.payer_site_id == site_id:
            totals["advance_paid_to_supervisor"] += transfer.amount
        if transfer.receiver_site_id == site_id:
            totals["funds_received_from_supervisor"] += transfer.amount

    figures = {name: to_money(value) for name, value in totals.items()}
    balance = compute_balance(
        funds_received=figures["funds_received"],
        funds_received_from_supervisor=figures[
            "funds_received_from_supervisor"
        ],
        total_expenses=figures["total_expenses"],
        total_advances=figures["total_advances"],
        total_invoices=figures["total_invoices"],
        advance_paid_to_supervisor=figures["advance_paid_to_supervisor"],
    )
    return SiteFinancialSummary(
        site_id=site_id,
        balance=balance,
        revision=revision,
        updated_at=updated_at,
        **figures,
    )


def _transaction_field(record: SiteTransaction) -> str | None:
    if record.kind is TransactionKind.FUNDS_RECEIVED:
        return "funds_received"
    if record.kind is TransactionKind.EXPENSE:
        return "total_expenses"
    if record.kind is TransactionKind.ADVANCE:
        purpose = record.metadata.get(PURPOSE_KEY, AdvancePurpose.ADVANCE.value)
        if purpose in DEBIT_TO_WORKER_PURPOSES:
            return "debit_to_worker"
        return "total_advances"
    if record.kind is TransactionKind.INVOICE:
        approver = record.metadata.get(
            APPROVER_TYPE_KEY, InvoiceApprover.SUPERVISOR.value
        )
        if approver != InvoiceApprover.SUPERVISOR.value:
            # Settled by the head office, not from site cash.
            return None
        payment_status = record.metadata.get(
            PAYMENT_STATUS_KEY, InvoicePaymentStatus.PAID.value
        )
        if payment_status == InvoicePaymentStatus.PAID.value:
            return "total_invoices"
        return "pending_invoices"
    return None


__all__ = ["compute_balance", "compute_site_summary"]
