"""
inventory_engines.valuation.average_cost -- Weighted average cost over receipts.

Responsibility:
    Compute one blended unit cost from every receipt a product ever had and
    value the on-hand quantity at it.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by inventory_services.valuation_service.

Invariants enforced:
    - Only receipts (quantity > 0) enter the numerator and denominator.
      The average is "cost of everything ever received", independent of
      sale order and of whether qty_on_hand matches the ledger.
    - Exact Decimal arithmetic; rounding (half away from zero) is applied
      once to the average and once to the value.
    - When qty_on_hand equals the total received quantity the value is the
      exact receipt total, so a receipts-only ledger values identically
      under AVERAGE, FIFO and LIFO.
    - value_cents is 0 when qty_on_hand <= 0.

Failure modes:
    - No receipts is not an error: avg and value are 0 and
      has_unknown_cost is True when qty_on_hand != 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from inventory_engines.tracer import traced_engine
from inventory_kernel.domain.ledger import StockLedgerEntry
from inventory_kernel.domain.values import ZERO, round_cents
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.average_cost")


@dataclass(frozen=True, slots=True)
class AverageCostResult:
    """Weighted average unit cost and the on-hand value it implies."""

    avg_cost_cents: int
    value_cents: int
    has_unknown_cost: bool
    receipt_count: int = 0
    receipt_quantity: Decimal = ZERO
    receipt_value_cents: Decimal = ZERO


@traced_engine("average_cost", "1.0", fingerprint_fields=("entries", "qty_on_hand"))
def compute_average(
    entries: Iterable[StockLedgerEntry],
    qty_on_hand: Decimal,
) -> AverageCostResult:
    """
    Value ``qty_on_hand`` at the weighted average cost of all receipts.

    Preconditions:
        entries are sanitized (finite quantities, finite receipt costs).

    Postconditions:
        avg_cost_cents = round(sum(q * c) / sum(q)) over receipts.
        value_cents    = 0 if qty_on_hand <= 0
                         round(sum(q * c)) if qty_on_hand == sum(q)
                         round(qty_on_hand * avg_cost_cents) otherwise.
    """
    receipt_count = 0
    total_qty = ZERO
    total_value = ZERO

    for entry in entries:
        if not entry.is_receipt:
            continue
        receipt_count += 1
        total_qty += entry.quantity
        total_value += entry.quantity * entry.unit_cost_cents

    if receipt_count == 0:
        has_unknown = qty_on_hand != ZERO
        if has_unknown:
            logger.info("average_cost_unknown", extra={
                "qty_on_hand": str(qty_on_hand),
            })
        return AverageCostResult(
            avg_cost_cents=0,
            value_cents=0,
            has_unknown_cost=has_unknown,
        )

    avg_cost_cents = round_cents(total_value / total_qty)

    if qty_on_hand <= ZERO:
        value_cents = 0
    elif qty_on_hand == total_qty:
        value_cents = round_cents(total_value)
    else:
        value_cents = round_cents(qty_on_hand * avg_cost_cents)

    logger.debug("average_cost_computed", extra={
        "receipt_count": receipt_count,
        "receipt_quantity": str(total_qty),
        "receipt_value_cents": str(total_value),
        "avg_cost_cents": avg_cost_cents,
        "value_cents": value_cents,
    })

    return AverageCostResult(
        avg_cost_cents=avg_cost_cents,
        value_cents=value_cents,
        has_unknown_cost=False,
        receipt_count=receipt_count,
        receipt_quantity=total_qty,
        receipt_value_cents=total_value,
    )
