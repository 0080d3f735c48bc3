"""
Valuation -- Valuation method vocabulary shared by engines and services.

Responsibility:
    Names the three accounting conventions the valuation engine supports
    and parses caller input into them.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - UnsupportedMethodError (UNSUPPORTED_VALUATION_METHOD) from
      ``ValuationMethod.parse`` for anything other than AVERAGE/FIFO/LIFO.
"""

from __future__ import annotations

from enum import Enum

from inventory_kernel.exceptions import UnsupportedMethodError
from inventory_kernel.logging_config import get_logger

logger = get_logger("domain.valuation")


class ValuationMethod(str, Enum):
    """Inventory valuation methods."""

    AVERAGE = "AVERAGE"  # Weighted average over all receipts
    FIFO = "FIFO"        # First-in, first-out
    LIFO = "LIFO"        # Last-in, first-out

    @classmethod
    def parse(cls, value: ValuationMethod | str) -> ValuationMethod:
        """Accept an enum member or a case-insensitive name.

        Raises:
            UnsupportedMethodError: If value names no supported method.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        logger.warning("valuation_method_rejected", extra={"method": repr(value)})
        raise UnsupportedMethodError(value)
