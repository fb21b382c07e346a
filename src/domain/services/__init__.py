"""Domain services package."""

from .aggregation import compute_balance, compute_site_summary
from .validation import (
    normalize_metadata,
    parse_transaction_kind,
    parse_transaction_status,
    parse_transfer_kind,
    validate_amount,
)

__all__ = [
    "compute_balance",
    "compute_site_summary",
    "normalize_metadata",
    "parse_transaction_kind",
    "parse_transaction_status",
    "parse_transfer_kind",
    "validate_amount",
]
