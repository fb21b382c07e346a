"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation

CENT = Decimal("0.01")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value cannot be read as a number.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric value: {value!r}")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a numeric value: {value!r}") from exc


def to_money(value) -> Decimal:
    """Return the value as a Decimal quantized to cents.

    Args:
        value: Raw numeric value from SQL, adapters or callers.

    Returns:
        Decimal: Amount rounded to two decimal places.
    """
    return coerce_decimal(value).quantize(CENT)


__all__ = ["CENT", "coerce_decimal", "to_money"]
