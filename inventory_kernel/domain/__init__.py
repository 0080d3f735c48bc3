"""Pure domain types for the inventory kernel (zero I/O)."""

from inventory_kernel.domain.ledger import (
    InMemoryLedgerStore,
    InMemoryOnHandSource,
    LedgerReason,
    LedgerStore,
    OnHandSource,
    StockLedgerEntry,
)
from inventory_kernel.domain.valuation import ValuationMethod
from inventory_kernel.domain.values import round_cents, to_decimal

__all__ = [
    "InMemoryLedgerStore",
    "InMemoryOnHandSource",
    "LedgerReason",
    "LedgerStore",
    "OnHandSource",
    "StockLedgerEntry",
    "ValuationMethod",
    "round_cents",
    "to_decimal",
]
