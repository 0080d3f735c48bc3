"""
inventory_engines.valuation.result -- Valuation result value objects.

Responsibility:
    Define the frozen ``ValuationResult`` returned for one product and the
    ``InventoryValuationSummary`` returned for the whole inventory.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - value_cents >= 0.
    - qty_on_hand == 0 implies value_cents == 0, avg_cost_cents == 0,
      has_unknown_cost is False and no layers (see ValuationResult.zero).
    - fifo_layers is only populated for FIFO, lifo_layers only for LIFO.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from inventory_engines.valuation.cost_layer import LayerSnapshot
from inventory_kernel.domain.valuation import ValuationMethod
from inventory_kernel.domain.values import ZERO


@dataclass(frozen=True, slots=True)
class ValuationResult:
    """
    Value of one product's on-hand stock under one method.

    ``qty_on_hand`` is the caller-supplied quantity, passed through
    unchanged.  ``unmatched_consumption``, ``skipped_entries`` and
    ``clamped_entries`` are diagnostics: oversold units discarded during
    replay, malformed ledger rows dropped before it, and receipts whose
    negative cost was read as zero.
    """

    product_id: int
    method: ValuationMethod
    qty_on_hand: Decimal
    value_cents: int
    avg_cost_cents: int
    has_unknown_cost: bool
    fifo_layers: tuple[LayerSnapshot, ...] = ()
    lifo_layers: tuple[LayerSnapshot, ...] = ()
    unmatched_consumption: Decimal = ZERO
    skipped_entries: int = 0
    clamped_entries: int = 0

    def __post_init__(self) -> None:
        if self.value_cents < 0:
            raise ValueError(f"value_cents cannot be negative, got {self.value_cents}")

    @property
    def layers(self) -> tuple[LayerSnapshot, ...]:
        """Layers for the method that produced this result (empty for AVERAGE)."""
        if self.method is ValuationMethod.FIFO:
            return self.fifo_layers
        if self.method is ValuationMethod.LIFO:
            return self.lifo_layers
        return ()

    @classmethod
    def zero(
        cls,
        product_id: int,
        method: ValuationMethod,
        qty_on_hand: Decimal = ZERO,
    ) -> ValuationResult:
        """Zero-valued result; ``qty_on_hand`` is reported as given."""
        return cls(
            product_id=product_id,
            method=method,
            qty_on_hand=qty_on_hand,
            value_cents=0,
            avg_cost_cents=0,
            has_unknown_cost=False,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly mapping for the reporting layer."""
        payload: dict[str, Any] = {
            "product_id": self.product_id,
            "method": self.method.value,
            "qty_on_hand": str(self.qty_on_hand),
            "value_cents": self.value_cents,
            "avg_cost_cents": self.avg_cost_cents,
            "has_unknown_cost": self.has_unknown_cost,
        }
        if self.method is ValuationMethod.FIFO:
            payload["fifo_layers"] = [layer.to_dict() for layer in self.fifo_layers]
        elif self.method is ValuationMethod.LIFO:
            payload["lifo_layers"] = [layer.to_dict() for layer in self.lifo_layers]
        if self.unmatched_consumption:
            payload["unmatched_consumption"] = str(self.unmatched_consumption)
        if self.skipped_entries:
            payload["skipped_entries"] = self.skipped_entries
        if self.clamped_entries:
            payload["clamped_entries"] = self.clamped_entries
        return payload


@dataclass(frozen=True, slots=True)
class InventoryValuationSummary:
    """Total inventory value under one method."""

    method: ValuationMethod
    total_value_cents: int
    total_products: int
    products_valued: int
    products_with_unknown_cost: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method.value,
            "total_value_cents": self.total_value_cents,
            "total_products": self.total_products,
            "products_valued": self.products_valued,
            "products_with_unknown_cost": self.products_with_unknown_cost,
        }
