"""
Module: inventory_kernel.models.product
Responsibility: ORM persistence for products and their authoritative
    on-hand quantity.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - qty_on_hand is maintained by the sales/purchasing write path, not by
      the valuation engine, and may legitimately disagree with the ledger
      sum (oversold or not-yet-reconciled stock).
    - is_active gates inclusion in inventory-wide totals.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base


class ProductModel(Base):
    """
    Persistent product row.

    Non-goals:
        - Pricing, categories and barcodes belong to the catalog and are
          not modelled here.
    """

    __tablename__ = "products"

    sku: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    name: Mapped[str] = mapped_column(
        String(400),
        nullable=False,
    )

    # Stock unit, e.g. "pcs", "kg"
    unit: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pcs",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    qty_on_hand: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        nullable=False,
        default=Decimal("0"),
    )

    def __repr__(self) -> str:
        return f"<Product {self.id}: {self.sku} qty={self.qty_on_hand}>"
