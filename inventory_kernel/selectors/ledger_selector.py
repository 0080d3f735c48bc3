"""
Module: inventory_kernel.selectors.ledger_selector
Responsibility: Read-only stock ledger queries.  Implements the LedgerStore
    protocol the valuation engine reads through, plus ledger-derived stock
    on hand for deployments that keep no stock column.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Entries are returned ascending by (created_at, id), so replay is
      deterministic and timestamp ties resolve in insertion order.
    - Rows are mapped to frozen StockLedgerEntry DTOs; callers never see ORM
      instances and cannot mutate the ledger through them.

Failure modes:
    - Returns an empty tuple / zero when the product has no movements.
"""

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy import func, select

from inventory_kernel.domain.ledger import StockLedgerEntry
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.product import ProductModel
from inventory_kernel.models.stock_ledger import StockLedgerModel
from inventory_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.ledger")


class LedgerSelector(BaseSelector[StockLedgerModel]):
    """SQLAlchemy-backed LedgerStore."""

    def list_entries(self, product_id: int) -> Sequence[StockLedgerEntry]:
        """All movements for a product, oldest first."""
        stmt = (
            select(StockLedgerModel)
            .where(StockLedgerModel.product_id == product_id)
            .order_by(StockLedgerModel.created_at, StockLedgerModel.id)
        )
        rows = self.session.execute(stmt).scalars().all()

        logger.debug("ledger_entries_loaded", extra={
            "product_id": product_id,
            "row_count": len(rows),
        })

        return tuple(self._to_entry(row) for row in rows)

    def sum_quantity(self, product_id: int) -> Decimal:
        """Net quantity over every movement of a product."""
        stmt = select(
            func.coalesce(func.sum(StockLedgerModel.quantity), 0)
        ).where(StockLedgerModel.product_id == product_id)
        total = self.session.execute(stmt).scalar_one()
        return Decimal(str(total))

    def list_product_ids(self, active_only: bool = False) -> list[int]:
        """Ids of products with at least one movement.

        With ``active_only``, products flagged inactive are left out.
        """
        stmt = select(StockLedgerModel.product_id).distinct()
        if active_only:
            stmt = stmt.join(
                ProductModel, ProductModel.id == StockLedgerModel.product_id
            ).where(ProductModel.is_active.is_(True))
        stmt = stmt.order_by(StockLedgerModel.product_id)
        return list(self.session.execute(stmt).scalars().all())

    @staticmethod
    def _to_entry(row: StockLedgerModel) -> StockLedgerEntry:
        return StockLedgerEntry(
            product_id=row.product_id,
            quantity=row.quantity,
            unit_cost_cents=row.unit_cost_cents,
            created_at=row.created_at,
            reason=row.reason,
            balance_after=row.balance_after,
            entry_id=row.id,
            ref_id=row.ref_id,
        )


class LedgerOnHandSource:
    """OnHandSource that derives stock on hand from the ledger sum.

    A product counts as active when it has ledger activity and is not
    flagged inactive in the products table.
    """

    def __init__(self, selector: LedgerSelector):
        self.selector = selector

    def get_qty_on_hand(self, product_id: int) -> Decimal:
        return self.selector.sum_quantity(product_id)

    def list_active_product_ids(self) -> list[int]:
        return self.selector.list_product_ids(active_only=True)
