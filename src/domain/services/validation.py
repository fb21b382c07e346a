"""Domain validation helpers for ledger requests."""

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from src.domain.constants import (
    APPROVER_TYPE_KEY,
    PAYMENT_STATUS_KEY,
    PURPOSE_KEY,
    AdvancePurpose,
    InvoiceApprover,
    InvoicePaymentStatus,
    TransactionKind,
    TransactionStatus,
    TransferKind,
)
from src.domain.errors import ValidationError
from src.utils.decimal_utils import CENT, coerce_decimal

# NUMERIC(12, 2) leaves ten integer digits.
MAX_AMOUNT = Decimal("9999999999.99")

_EnumT = TypeVar("_EnumT", bound=Enum)

_JSON_SCALARS = (str, int, float, bool, type(None))


def _parse_enum(enum_cls: type[_EnumT], value: Any, label: str) -> _EnumT:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Unknown {label}: {value!r}")
    try:
        return enum_cls(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Unknown {label}: {value!r} (expected one of {allowed})"
        ) from exc


def _check_json_value(key: str, value: Any) -> None:
    if isinstance(value, _JSON_SCALARS):
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _check_json_value(key, item)
        return
    if isinstance(value, Mapping):
        for inner_key, inner in value.items():
            if not isinstance(inner_key, str):
                raise ValidationError(
                    f"Metadata keys must be strings: {inner_key!r}"
                )
            _check_json_value(key, inner)
        return
    raise ValidationError(
        f"Metadata value of {key!r} is not JSON-compatible: {value!r}"
    )


def parse_transaction_kind(value: Any) -> TransactionKind:
    """Validate a transaction kind against the closed enum.

    Args:
        value: Raw kind supplied by the caller.

    Returns:
        TransactionKind: Parsed kind.

    Raises:
        ValidationError: If the kind is not one of the supported kinds.
    """
    return _parse_enum(TransactionKind, value, "transaction kind")


def parse_transaction_status(value: Any) -> TransactionStatus:
    return _parse_enum(TransactionStatus, value, "transaction status")


def parse_transfer_kind(value: Any) -> TransferKind:
    return _parse_enum(TransferKind, value, "transfer kind")


def validate_amount(value: Any) -> Decimal:
    """Validate a monetary amount and quantize it to cents.

    Args:
        value: Raw amount (Decimal, int, float or numeric string).

    Returns:
        Decimal: Positive amount with two decimal places.

    Raises:
        ValidationError: If the amount is not a finite positive number or
            carries more precision than cents.
    """
    try:
        amount = coerce_decimal(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    if value is None or not amount.is_finite():
        raise ValidationError(f"Amount must be a finite number: {value!r}")
    if amount <= 0:
        raise ValidationError(f"Amount must be positive: {amount}")
    quantized = amount.quantize(CENT)
    if quantized != amount:
        raise ValidationError(f"Amount has more than two decimals: {amount}")
    if quantized > MAX_AMOUNT:
        raise ValidationError(f"Amount exceeds {MAX_AMOUNT}: {amount}")
    return quantized


def normalize_metadata(
    kind: TransactionKind,
    metadata: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Validate caller metadata and fill the kind-specific defaults.

    Advances carry a ``purpose`` (default ``advance``); invoices carry a
    ``payment_status`` (default ``paid``) and an ``approver_type`` (default
    ``supervisor``). These keys decide which summary field a record feeds.

    Args:
        kind: Kind of the transaction being created.
        metadata: Optional free-form metadata from the caller.

    Returns:
        dict[str, Any]: Copy of the metadata with normalized known keys.

    Raises:
        ValidationError: If the metadata is not a string-keyed mapping or a
            known key holds an unsupported value, or a value is not a JSON
            string, number, boolean, null, list or string-keyed mapping.
    """
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, Mapping):
        raise ValidationError("Metadata must be a mapping of string keys.")
    normalized: dict[str, Any] = {}
    for key, value in metadata.items():
        if not isinstance(key, str):
            raise ValidationError(f"Metadata keys must be strings: {key!r}")
        _check_json_value(key, value)
        normalized[key] = value

    if kind is TransactionKind.ADVANCE:
        purpose = normalized.get(PURPOSE_KEY, AdvancePurpose.ADVANCE.value)
        normalized[PURPOSE_KEY] = _parse_enum(
            AdvancePurpose, purpose, "advance purpose"
        ).value
    elif kind is TransactionKind.INVOICE:
        payment_status = normalized.get(
            PAYMENT_STATUS_KEY, InvoicePaymentStatus.PAID.value
        )
        approver = normalized.get(
            APPROVER_TYPE_KEY, InvoiceApprover.SUPERVISOR.value
        )
        normalized[PAYMENT_STATUS_KEY] = _parse_enum(
            InvoicePaymentStatus, payment_status, "invoice payment status"
        ).value
        normalized[APPROVER_TYPE_KEY] = _parse_enum(
            InvoiceApprover, approver, "invoice approver type"
        ).value
    return normalized


__all__ = [
    "MAX_AMOUNT",
    "parse_transaction_kind",
    "parse_transaction_status",
    "parse_transfer_kind",
    "validate_amount",
    "normalize_metadata",
]
