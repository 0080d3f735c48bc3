"""
Values -- Decimal coercion and cents rounding for stock valuation.

Responsibility:
    Provides the numeric primitives every valuation computation uses:
    converting ledger inputs to ``Decimal`` without binary-float drift,
    detecting non-finite values, and rounding monetary results to whole
    cents.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by the ledger domain types and by every engine.

Invariants enforced:
    - Decimal-only arithmetic: quantities and costs are ``Decimal``; floats
      are converted through ``str()`` so ``0.1`` stays ``Decimal("0.1")``.
    - ``round_cents`` is the ONLY sanctioned rounding function for
      valuation output.  It rounds half away from zero (``ROUND_HALF_UP``
      in ``decimal`` terms) on the exact rational input.

Failure modes:
    - ``decimal.InvalidOperation`` / ``TypeError`` from ``to_decimal`` when
      the input is not numeric at all.
    - ``ValueError`` from ``round_cents`` on NaN or infinity.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")

# Half away from zero: 0.5 -> 1, -0.5 -> -1
CENTS_ROUNDING = ROUND_HALF_UP


def to_decimal(value: Any) -> Decimal:
    """
    Convert an int, str, float or Decimal to Decimal.

    Floats go through ``str()`` so the shortest repr is used rather than
    the binary expansion.  NaN and infinity are preserved; callers decide
    what to do with them.

    Raises:
        InvalidOperation: If a string is not a number.
        TypeError: If the value is not a numeric type or string.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Expected a number, got bool {value!r}")
    if isinstance(value, (int, str)):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    raise TypeError(f"Expected a number, got {type(value).__name__}")


def round_cents(value: Decimal) -> int:
    """
    Round a cents amount to an integer, half away from zero.

    Preconditions: value is a finite Decimal.
    Postconditions: Returns the nearest int; exact halves move away from zero.

    Raises:
        ValueError: If value is NaN or infinite.
    """
    if not value.is_finite():
        raise ValueError(f"Cannot round non-finite amount: {value}")
    try:
        return int(value.quantize(Decimal("1"), rounding=CENTS_ROUNDING))
    except InvalidOperation as e:
        raise ValueError(f"Cannot round amount: {value}") from e
