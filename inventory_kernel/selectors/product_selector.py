"""
Module: inventory_kernel.selectors.product_selector
Responsibility: Read-only product queries.  Implements the OnHandSource
    protocol from the products table, which holds the authoritative
    on-hand quantity maintained by the sales and purchasing write path.
Architecture position: Kernel > Selectors.

Failure modes:
    - get_qty_on_hand returns zero for an unknown product id, which the
      valuation engine values at zero without reading the ledger.
"""

from decimal import Decimal

from sqlalchemy import select

from inventory_kernel.models.product import ProductModel
from inventory_kernel.selectors.base import BaseSelector


class ProductSelector(BaseSelector[ProductModel]):
    """SQLAlchemy-backed OnHandSource."""

    def get_qty_on_hand(self, product_id: int) -> Decimal:
        stmt = select(ProductModel.qty_on_hand).where(ProductModel.id == product_id)
        qty = self.session.execute(stmt).scalar_one_or_none()
        return Decimal("0") if qty is None else Decimal(qty)

    def list_active_product_ids(self) -> list[int]:
        stmt = (
            select(ProductModel.id)
            .where(ProductModel.is_active.is_(True))
            .order_by(ProductModel.id)
        )
        return list(self.session.execute(stmt).scalars().all())
