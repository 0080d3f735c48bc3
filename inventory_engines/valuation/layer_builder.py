"""
inventory_engines.valuation.layer_builder -- Replay a stock ledger into cost layers.

Responsibility:
    Rebuild the cost layers that survive a product's movement history.
    Receipts open a layer at their unit cost; consumptions draw layers down
    from the front (OLDEST_FIRST, FIFO) or the back (NEWEST_FIRST, LIFO).
    One replay loop serves both policies.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by inventory_services.valuation_service.

Invariants enforced:
    - Deterministic: entries are stably sorted by created_at, so equal
      timestamps keep the order the ledger store supplied (insertion order).
    - Open layers live in a deque.  Exhausted layers are popped from the end
      being consumed, so every layer is appended once and removed at most
      once: the whole replay is amortised O(n).
    - Returned layers all have quantity > 0; FIFO output is oldest-first,
      LIFO output newest-first.
    - A consuming entry's own unit cost is never read.

Failure modes:
    - Oversold consumption (more units out than remaining layers hold) is
      not an error.  The unmatched remainder is discarded, summed into
      LayerReplay.unmatched_consumption and logged as a warning.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.cost_layer import (
    ConsumptionPolicy,
    CostLayer,
    LayerReplay,
)
from inventory_kernel.domain.ledger import StockLedgerEntry
from inventory_kernel.domain.values import ZERO
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.layer_builder")


@traced_engine("layer_builder", "1.0", fingerprint_fields=("entries", "policy"))
def build_layers(
    entries: Iterable[StockLedgerEntry],
    policy: ConsumptionPolicy,
) -> LayerReplay:
    """
    Replay entries chronologically into the surviving cost layers.

    Preconditions:
        entries are sanitized (finite, non-zero quantities; finite receipt
        costs).  They need not be pre-sorted.

    Postconditions:
        Returns a LayerReplay whose layers all have quantity > 0, ordered
        oldest-first for OLDEST_FIRST and newest-first for NEWEST_FIRST.
    """
    ordered = sorted(entries, key=lambda e: e.created_at)
    oldest_first = policy is ConsumptionPolicy.OLDEST_FIRST

    open_layers: deque[CostLayer] = deque()
    receipt_count = 0
    unmatched = ZERO

    for entry in ordered:
        if entry.is_receipt:
            receipt_count += 1
            open_layers.append(
                CostLayer(
                    quantity_remaining=entry.quantity,
                    unit_cost_cents=entry.unit_cost_cents,
                    created_at=entry.created_at,
                )
            )
            continue

        to_consume = -entry.quantity
        while to_consume > ZERO and open_layers:
            layer = open_layers[0] if oldest_first else open_layers[-1]
            to_consume -= layer.take(to_consume)
            if layer.is_depleted:
                if oldest_first:
                    open_layers.popleft()
                else:
                    open_layers.pop()

        if to_consume > ZERO:
            unmatched += to_consume
            logger.warning("consumption_exceeds_layers", extra={
                "entry_id": entry.entry_id,
                "product_id": entry.product_id,
                "policy": policy.value,
                "unmatched_quantity": str(to_consume),
            })

    survivors = open_layers if oldest_first else reversed(open_layers)
    layers = tuple(layer.snapshot() for layer in survivors)

    logger.debug("layer_replay_completed", extra={
        "policy": policy.value,
        "entry_count": len(ordered),
        "receipt_count": receipt_count,
        "layer_count": len(layers),
        "unmatched_consumption": str(unmatched),
    })

    return LayerReplay(
        policy=policy,
        layers=layers,
        receipt_count=receipt_count,
        unmatched_consumption=unmatched,
    )
