"""Domain models package."""

from .ledger import Site, SiteTransaction, SupervisorTransfer
from .summary import (
    ZERO,
    SiteFinancialSummary,
    SummaryChanged,
    SummaryDrift,
)

__all__ = [
    "Site",
    "SiteTransaction",
    "SupervisorTransfer",
    "ZERO",
    "SiteFinancialSummary",
    "SummaryChanged",
    "SummaryDrift",
]
