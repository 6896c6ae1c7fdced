"""
Module: bizledger_kernel.db.types
Responsibility: Annotated type aliases and helpers for financial-grade
    amounts.  Centralizes precision, rounding and the balance tolerance test
    so every model, selector and statement uses identical definitions.
Architecture position: Kernel > DB.  MUST NOT import from models/,
    selectors/ or domain/.

Invariants enforced:
    No floats anywhere.  All amounts are Decimal with explicit precision;
    ``round_money`` is the only sanctioned rounding function and
    ``within_tolerance`` the only sanctioned "balanced" comparison.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric

# 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

# Inventory quantities share the money precision (fractional units allowed)
Quantity = Annotated[Decimal, Numeric(38, 9)]

DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def round_money(
    value: Decimal,
    decimal_places: int = 2,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the given number of decimal places.

    Args:
        value: The Decimal value to round.
        decimal_places: Number of decimal places to keep.
        rounding: Rounding mode (default: ROUND_HALF_UP).

    Returns:
        Rounded Decimal value.
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places else "0"
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def to_decimal(value: object) -> Decimal:
    """
    Normalize a value read from the store into a Decimal.

    NULL aggregates (``SUM`` over no rows) become zero.  Floats are routed
    through ``str`` so no binary noise leaks into the Decimal.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def within_tolerance(left: Decimal, right: Decimal, tolerance: Decimal) -> bool:
    """
    Compare two totals for a "balanced" check.

    A zero tolerance means exact equality, which is correct for Decimal
    fixed-point amounts.  A positive tolerance ``eps`` means
    ``|left - right| < eps``.
    """
    if tolerance == ZERO:
        return left == right
    return abs(left - right) < tolerance


def ensure_utc(value: datetime) -> datetime:
    """
    Return ``value`` as an aware UTC datetime.

    Some backends (SQLite) hand back naive datetimes for timezone-aware
    columns; those are stored as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
