"""
inventory_engines.valuation.cost_layer -- Cost layer types for FIFO/LIFO replay.

Responsibility:
    Define the mutable ``CostLayer`` used while replaying a ledger, the
    frozen ``LayerSnapshot`` handed back to callers, the
    ``ConsumptionPolicy`` that picks which end of the layer queue a
    consumption draws from, and the ``LayerReplay`` result.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel domain types and logging.

Invariants enforced:
    - A CostLayer is created once per receipt entry and mutated only by
      consumption during a single replay; it never escapes the replay.
    - Callers only ever see LayerSnapshot, and only with quantity > 0.
    - LayerSnapshot.value_cents is exact (unrounded); rounding happens once
      on the total in the valuation service.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from inventory_kernel.domain.values import ZERO


class ConsumptionPolicy(str, Enum):
    """Which receipt layer a consumption draws from first."""

    OLDEST_FIRST = "oldest_first"  # FIFO
    NEWEST_FIRST = "newest_first"  # LIFO


@dataclass(slots=True)
class CostLayer:
    """A surviving slice of one receipt during replay."""

    quantity_remaining: Decimal
    unit_cost_cents: Decimal
    created_at: datetime

    def take(self, wanted: Decimal) -> Decimal:
        """Deduct up to ``wanted`` units and return how many were taken."""
        taken = min(wanted, self.quantity_remaining)
        self.quantity_remaining -= taken
        return taken

    @property
    def is_depleted(self) -> bool:
        return self.quantity_remaining <= ZERO

    def snapshot(self) -> LayerSnapshot:
        return LayerSnapshot(
            quantity=self.quantity_remaining,
            unit_cost_cents=self.unit_cost_cents,
            created_at=self.created_at,
        )


@dataclass(frozen=True, slots=True)
class LayerSnapshot:
    """Remaining quantity of a receipt at its original unit cost."""

    quantity: Decimal
    unit_cost_cents: Decimal
    created_at: datetime

    @property
    def value_cents(self) -> Decimal:
        return self.quantity * self.unit_cost_cents

    def to_dict(self) -> dict[str, str]:
        return {
            "quantity": str(self.quantity),
            "unit_cost_cents": str(self.unit_cost_cents),
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class LayerReplay:
    """
    Outcome of replaying a ledger into cost layers.

    ``layers`` is oldest-first for OLDEST_FIRST and newest-first for
    NEWEST_FIRST.  ``unmatched_consumption`` is the total consumption that
    found no layer to draw from (oversold stock) and was discarded.
    """

    policy: ConsumptionPolicy
    layers: tuple[LayerSnapshot, ...]
    receipt_count: int
    unmatched_consumption: Decimal = ZERO

    @property
    def total_quantity(self) -> Decimal:
        return sum((layer.quantity for layer in self.layers), ZERO)

    @property
    def total_value_cents(self) -> Decimal:
        """Exact value of the remaining layers, before rounding."""
        return sum((layer.value_cents for layer in self.layers), ZERO)

    @property
    def has_receipts(self) -> bool:
        return self.receipt_count > 0
