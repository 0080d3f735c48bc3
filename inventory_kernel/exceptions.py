"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the valuation engine (report exporters, the stock API) need to
tell a rejected request apart from a misconfigured deployment without
parsing message text.  Every exception therefore:
  1. Has its own class (catch by type, not message)
  2. Carries a static CODE attribute (machine-readable, API-safe)
  3. Stores its context as attributes (not just a message string)

Example:
    try:
        result = engine.compute_valuation(product_id, qty, method)
    except UnsupportedMethodError as e:
        return {"error": e.code, "method": e.method}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- ValuationError
    |   +-- UnsupportedMethodError
    |   +-- OnHandSourceMissingError
    |
    +-- LedgerError
    |   +-- MalformedLedgerEntryError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|---------------------------------------
Valuation       | UNSUPPORTED_VALUATION_METHOD  | Method is not AVERAGE / FIFO / LIFO
                | ON_HAND_SOURCE_MISSING        | Bulk/total valuation without a stock source
----------------|-------------------------------|---------------------------------------
Ledger          | MALFORMED_LEDGER_ENTRY        | A ledger value cannot be converted at all
----------------|-------------------------------|---------------------------------------
Configuration   | INVALID_CONFIGURATION         | Config file has an unknown or bad value

Unknown cost is NOT an exception.  A product with stock but no receipt
history is a normal outcome reported through
``ValuationResult.has_unknown_cost``.

Malformed rows that reach the engine are dropped by the entry sanitizer
and logged; ``MalformedLedgerEntryError`` is only raised when building a
``StockLedgerEntry`` from raw input that is not a number at all.
"""


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Valuation exceptions


class ValuationError(InventoryKernelError):
    """Base exception for valuation errors."""

    code: str = "VALUATION_ERROR"


class UnsupportedMethodError(ValuationError):
    """Requested valuation method is not AVERAGE, FIFO or LIFO."""

    code: str = "UNSUPPORTED_VALUATION_METHOD"

    def __init__(self, method: object):
        self.method = str(method)
        super().__init__(f"Unsupported valuation method: {method!r}")


class OnHandSourceMissingError(ValuationError):
    """A bulk operation needs on-hand quantities but no source was wired."""

    code: str = "ON_HAND_SOURCE_MISSING"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"{operation} requires an on-hand quantity source"
        )


# Ledger exceptions


class LedgerError(InventoryKernelError):
    """Base exception for stock ledger errors."""

    code: str = "LEDGER_ERROR"


class MalformedLedgerEntryError(LedgerError):
    """A ledger field could not be converted to a number."""

    code: str = "MALFORMED_LEDGER_ENTRY"

    def __init__(self, entry_id: int | None, field: str, value: object):
        self.entry_id = entry_id
        self.field = field
        self.value = repr(value)
        super().__init__(
            f"Ledger entry {entry_id}: cannot convert {field}={value!r} to a number"
        )


# Configuration exceptions


class ConfigurationError(InventoryKernelError):
    """Configuration file contains an invalid value."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid configuration in {path}: {detail}")
