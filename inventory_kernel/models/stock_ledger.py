"""
Module: inventory_kernel.models.stock_ledger
Responsibility: ORM persistence for stock ledger rows.  Each row is one
    immutable stock movement (receipt, sale, adjustment) for a product.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - Append-only.  Rows are inserted by the posting write path and
      never updated; the valuation engine only reads them.
    - Replay order.  The (product_id, created_at, id) index gives a
      deterministic ascending scan; id breaks timestamp ties in
      insertion order.
    - Sign carries meaning.  quantity > 0 is a receipt, < 0 is a
      consumption.  reason is informational only.

Audit relevance:
    unit_cost_cents on a consumption row and balance_after are audit
    fields; valuation never reads them.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base


class StockLedgerModel(Base):
    """Persistent storage for stock movements."""

    __tablename__ = "stock_ledger"

    __table_args__ = (
        # Query: replay all movements for a product in order
        Index("idx_ledger_product_created", "product_id", "created_at", "id"),
        # Query: movements in a time range
        Index("idx_ledger_created_at", "created_at"),
    )

    product_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("products.id"),
        nullable=False,
    )

    # Signed: positive is stock in, negative is stock out
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        nullable=False,
    )

    unit_cost_cents: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        nullable=False,
        default=Decimal("0"),
    )

    reason: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Source document (GRN id, sale id, ...)
    ref_id: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
    )

    balance_after: Mapped[Decimal | None] = mapped_column(
        Numeric(38, 9),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<StockLedger {self.id}: product={self.product_id} "
            f"qty={self.quantity} @ {self.unit_cost_cents} ({self.reason})>"
        )
