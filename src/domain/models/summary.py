"""Domain models for per-site financial summaries."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.domain.constants import SUMMARY_FIGURES

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class SiteFinancialSummary:
    """Aggregate row holding a site's running totals.

    ``balance`` always equals the inflows (funds received from the head
    office and from other supervisors) minus expenses, advances, paid
    invoices and advances paid to other supervisors. ``debit_to_worker`` and
    ``pending_invoices`` are informational and stay outside the balance.

    Attributes:
        site_id: Site the summary belongs to.
        funds_received: Funds received from the head office.
        funds_received_from_supervisor: Incoming supervisor transfers.
        total_expenses: Expenses paid from the site.
        total_advances: Cash advances with the ``advance`` purpose.
        total_invoices: Invoices paid by the site supervisor.
        advance_paid_to_supervisor: Outgoing supervisor transfers.
        debit_to_worker: Advances for tools, safety shoes and other items.
        pending_invoices: Supervisor invoices awaiting payment.
        balance: Current cash position of the site.
        revision: Counter bumped by every write that changes a figure.
        updated_at: Timestamp of the last write.
    """

    site_id: str
    funds_received: Decimal = ZERO
    funds_received_from_supervisor: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_advances: Decimal = ZERO
    total_invoices: Decimal = ZERO
    advance_paid_to_supervisor: Decimal = ZERO
    debit_to_worker: Decimal = ZERO
    pending_invoices: Decimal = ZERO
    balance: Decimal = ZERO
    revision: int = 0
    updated_at: datetime | None = None

    def figures(self) -> dict[str, Decimal]:
        """Return the monetary figures keyed by field name."""
        return {name: getattr(self, name) for name in SUMMARY_FIGURES}

    def same_figures(self, other: "SiteFinancialSummary | None") -> bool:
        """Return True when both summaries hold identical figures."""
        if other is None:
            return False
        return self.figures() == other.figures()


@dataclass(frozen=True)
class SummaryChanged:
    """Advisory event telling observers to re-read a summary."""

    site_id: str
    revision: int


@dataclass(frozen=True)
class SummaryDrift:
    """Difference between a stored summary and a fresh derivation.

    Attributes:
        site_id: Site whose stored row drifted.
        deltas: Field name to (derived - stored) difference, non-zero only.
        missing: True when the site has no stored summary at all.
    """

    site_id: str
    deltas: dict[str, Decimal]
    missing: bool = False


__all__ = [
    "ZERO",
    "SiteFinancialSummary",
    "SummaryChanged",
    "SummaryDrift",
]
