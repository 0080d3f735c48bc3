"""
Ledger -- Stock ledger entry value object and the ledger-store contract.

Responsibility:
    Defines ``StockLedgerEntry`` (one immutable stock movement), the
    ``LedgerReason`` tags, the ``LedgerStore`` / ``OnHandSource`` protocols
    the valuation engine reads through, and ``InMemoryLedgerStore``.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    SQL-backed implementations of the protocols live in
    ``inventory_kernel.selectors``.

Invariants enforced:
    - Entries are frozen; the engine never mutates the ledger.
    - ``quantity`` and ``unit_cost_cents`` are always ``Decimal``.
    - Only the sign of ``quantity`` matters for valuation; ``reason`` is
      informational and never inspected by the engines.
    - ``LedgerStore.list_entries`` returns entries ascending by
      ``(created_at, entry_id)``.

Failure modes:
    - ``MalformedLedgerEntryError`` from ``StockLedgerEntry.of`` when a
      numeric field is not a number at all.  NaN / infinity are accepted
      here and dropped later by the entry sanitizer.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from inventory_kernel.domain.values import ZERO, to_decimal
from inventory_kernel.exceptions import MalformedLedgerEntryError


class LedgerReason(str, Enum):
    """Why a stock movement was posted.  Informational only."""

    GRN = "GRN"                  # Goods received note
    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"
    RETURN = "RETURN"
    TRANSFER = "TRANSFER"
    OPENING = "OPENING"          # Opening balance


@dataclass(frozen=True, slots=True)
class StockLedgerEntry:
    """
    One immutable stock movement for a product.

    Positive quantity = receipt (stock in), negative = consumption (stock
    out).  ``unit_cost_cents`` on a consumption row is kept for audit only;
    valuation always prices consumed units from the cost layers or the
    average.
    """

    product_id: int
    quantity: Decimal
    unit_cost_cents: Decimal
    created_at: datetime
    reason: str = LedgerReason.ADJUSTMENT.value
    balance_after: Decimal | None = None
    entry_id: int | None = None
    ref_id: int | None = None

    @property
    def is_receipt(self) -> bool:
        return self.quantity > ZERO

    @property
    def is_consumption(self) -> bool:
        return self.quantity < ZERO

    @classmethod
    def of(
        cls,
        product_id: int,
        quantity: Decimal | int | float | str,
        unit_cost_cents: Decimal | int | float | str,
        created_at: datetime,
        reason: LedgerReason | str = LedgerReason.ADJUSTMENT,
        balance_after: Decimal | int | float | str | None = None,
        entry_id: int | None = None,
        ref_id: int | None = None,
    ) -> StockLedgerEntry:
        """Build an entry from raw values, coercing numbers to Decimal.

        Raises:
            MalformedLedgerEntryError: If quantity, cost or balance is not
                a number.
        """
        reason_value = reason.value if isinstance(reason, LedgerReason) else str(reason)
        return cls(
            product_id=product_id,
            quantity=_coerce(entry_id, "quantity", quantity),
            unit_cost_cents=_coerce(entry_id, "unit_cost_cents", unit_cost_cents),
            created_at=created_at,
            reason=reason_value,
            balance_after=(
                None if balance_after is None
                else _coerce(entry_id, "balance_after", balance_after)
            ),
            entry_id=entry_id,
            ref_id=ref_id,
        )


def _coerce(entry_id: int | None, field: str, value: Any) -> Decimal:
    try:
        return to_decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise MalformedLedgerEntryError(entry_id, field, value) from e


# =========================================================================
# Collaborator protocols
# =========================================================================


@runtime_checkable
class LedgerStore(Protocol):
    """Read access to the stock ledger.

    Implementations: InMemoryLedgerStore, LedgerSelector (SQLAlchemy).
    """

    def list_entries(self, product_id: int) -> Sequence[StockLedgerEntry]:
        """Return all entries for a product ascending by (created_at, entry_id)."""
        ...


@runtime_checkable
class OnHandSource(Protocol):
    """Authoritative on-hand quantities, supplied by the inventory store."""

    def get_qty_on_hand(self, product_id: int) -> Decimal:
        """Return the current on-hand quantity for a product."""
        ...

    def list_active_product_ids(self) -> list[int]:
        """Return ids of products that take part in inventory totals."""
        ...


class InMemoryLedgerStore:
    """LedgerStore backed by a dict, for tests and embedding.

    Entries keep their insertion order within equal timestamps.
    """

    def __init__(self, entries: Iterable[StockLedgerEntry] = ()):
        self._entries: dict[int, list[StockLedgerEntry]] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: StockLedgerEntry) -> None:
        self._entries.setdefault(entry.product_id, []).append(entry)

    def list_entries(self, product_id: int) -> Sequence[StockLedgerEntry]:
        # sorted() is stable, so ties keep insertion order
        return tuple(
            sorted(self._entries.get(product_id, ()), key=lambda e: e.created_at)
        )


class InMemoryOnHandSource:
    """OnHandSource backed by a dict of product_id -> quantity."""

    def __init__(
        self,
        quantities: dict[int, Decimal | int | str] | None = None,
        inactive: Iterable[int] = (),
    ):
        self._quantities = {
            pid: to_decimal(qty) for pid, qty in (quantities or {}).items()
        }
        self._inactive = frozenset(inactive)

    def get_qty_on_hand(self, product_id: int) -> Decimal:
        return self._quantities.get(product_id, ZERO)

    def list_active_product_ids(self) -> list[int]:
        return sorted(pid for pid in self._quantities if pid not in self._inactive)
