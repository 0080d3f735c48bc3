"""ORM models for the inventory kernel."""

from inventory_kernel.models.product import ProductModel
from inventory_kernel.models.stock_ledger import StockLedgerModel

__all__ = [
    "ProductModel",
    "StockLedgerModel",
]
