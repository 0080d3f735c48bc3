"""
inventory_engines.valuation.sanitize -- Drop or clamp malformed ledger rows.

Responsibility:
    Make replay total: rows whose numbers cannot take part in valuation are
    removed before the layer builder or average calculator sees them, and
    each removal is logged.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Rules:
    - quantity NaN / infinite          -> skipped
    - quantity zero                    -> skipped (a zero movement means nothing)
    - receipt with NaN / infinite cost -> skipped
    - receipt with negative cost       -> cost clamped to zero
    - consumption cost                 -> left as-is (never read)

Failure modes:
    - None.  Sanitizing never raises.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from inventory_kernel.domain.ledger import StockLedgerEntry
from inventory_kernel.domain.values import ZERO
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.sanitize")


@dataclass(frozen=True, slots=True)
class SanitizedEntries:
    """Entries safe to replay, plus how many were dropped."""

    entries: tuple[StockLedgerEntry, ...]
    skipped: int = 0
    clamped: int = 0


def sanitize_entries(entries: Iterable[StockLedgerEntry]) -> SanitizedEntries:
    """Return the usable entries, in their original order."""
    kept: list[StockLedgerEntry] = []
    skipped = 0
    clamped = 0

    for entry in entries:
        reason = _skip_reason(entry)
        if reason is not None:
            skipped += 1
            logger.warning("ledger_entry_skipped", extra={
                "entry_id": entry.entry_id,
                "product_id": entry.product_id,
                "skip_reason": reason,
                "quantity": str(entry.quantity),
                "unit_cost_cents": str(entry.unit_cost_cents),
            })
            continue

        if entry.quantity > ZERO and entry.unit_cost_cents < ZERO:
            clamped += 1
            logger.warning("ledger_entry_cost_clamped", extra={
                "entry_id": entry.entry_id,
                "product_id": entry.product_id,
                "unit_cost_cents": str(entry.unit_cost_cents),
            })
            entry = replace(entry, unit_cost_cents=ZERO)

        kept.append(entry)

    return SanitizedEntries(entries=tuple(kept), skipped=skipped, clamped=clamped)


def _skip_reason(entry: StockLedgerEntry) -> str | None:
    if not entry.quantity.is_finite():
        return "non_finite_quantity"
    if entry.quantity == ZERO:
        return "zero_quantity"
    if entry.quantity > ZERO and not entry.unit_cost_cents.is_finite():
        return "non_finite_cost"
    return None
