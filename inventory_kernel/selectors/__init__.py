"""Read-only selectors over the inventory tables."""

from inventory_kernel.selectors.base import BaseSelector
from inventory_kernel.selectors.ledger_selector import LedgerOnHandSource, LedgerSelector
from inventory_kernel.selectors.product_selector import ProductSelector

__all__ = [
    "BaseSelector",
    "LedgerOnHandSource",
    "LedgerSelector",
    "ProductSelector",
]
