"""
inventory_services.valuation_service -- Stock valuation under AVERAGE/FIFO/LIFO.

Responsibility:
    Value a product's on-hand stock from its ledger history.  Reads the
    ledger through a LedgerStore, applies the zero / negative stock and
    unknown-cost policies, and delegates the arithmetic to the pure engines
    (average_cost, layer_builder).  Also values many products at once and
    totals the whole inventory.

Architecture position:
    Services -- stateless orchestration over engines + kernel.
    Composes sanitize_entries, compute_average and build_layers
    (inventory_engines.valuation) with a LedgerStore and an optional
    OnHandSource (inventory_kernel.domain.ledger protocols).

Invariants enforced:
    - The method is validated before anything else; an unsupported method
      is rejected with no ledger read.
    - qty_on_hand == 0 short-circuits to the zero result without reading
      the ledger, whatever the history holds.
    - A NaN or infinite qty_on_hand is treated as no stock and logged.
    - qty_on_hand < 0 is valued at zero; average cost and layers are still
      computed for display.
    - has_unknown_cost is True iff the ledger has no usable receipt and
      qty_on_hand != 0.
    - value_cents is rounded once, half away from zero, from the exact sum.
    - No state is kept between calls; concurrent calls are safe as long as
      the collaborators are.

Failure modes:
    - UnsupportedMethodError from every valuation entry point when the
      method is not AVERAGE, FIFO or LIFO.
    - OnHandSourceMissingError from compute_bulk_valuation,
      get_total_inventory_value and get_stock_on_hand when no OnHandSource
      was supplied.
    - Empty ledgers, oversold consumption, zero costs and malformed rows
      are absorbed into the result, never raised.

Audit relevance:
    Each valuation is logged with product_id bound into LogContext, the
    method, quantity, value and diagnostic counts.  Engine invocations emit
    INVENTORY_ENGINE_TRACE records with input fingerprints.

Usage:
    from inventory_kernel.domain.ledger import InMemoryLedgerStore
    from inventory_services.valuation_service import ValuationEngine

    engine = ValuationEngine(InMemoryLedgerStore(entries))
    result = engine.compute_valuation(1, Decimal("100"), "FIFO")
    result.value_cents, result.fifo_layers
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

from inventory_engines.valuation import (
    ConsumptionPolicy,
    InventoryValuationSummary,
    ValuationResult,
    build_layers,
    compute_average,
    sanitize_entries,
)
from inventory_kernel.domain.ledger import LedgerStore, OnHandSource
from inventory_kernel.domain.valuation import ValuationMethod
from inventory_kernel.domain.values import ZERO, round_cents, to_decimal
from inventory_kernel.exceptions import OnHandSourceMissingError
from inventory_kernel.logging_config import LogContext, get_logger

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from inventory_config.schema import InventoryConfig

logger = get_logger("services.valuation")

_POLICY_BY_METHOD = {
    ValuationMethod.FIFO: ConsumptionPolicy.OLDEST_FIRST,
    ValuationMethod.LIFO: ConsumptionPolicy.NEWEST_FIRST,
}


class ValuationEngine:
    """
    Values inventory from the stock ledger.

    Contract:
        Receives a LedgerStore (and optionally an OnHandSource) via
        constructor injection.  Never writes to either.
    Guarantees:
        - ``compute_valuation`` is deterministic and idempotent for a given
          ledger snapshot and inputs.
        - ``compute_bulk_valuation`` and ``get_total_inventory_value`` read
          on-hand quantities from the OnHandSource.
    Non-goals:
        - Does not check qty_on_hand against the ledger sum.
        - Does not convert currencies or correct ledger data.
    """

    def __init__(
        self,
        ledger_store: LedgerStore,
        on_hand_source: OnHandSource | None = None,
        default_method: ValuationMethod | str = ValuationMethod.FIFO,
    ):
        self.ledger_store = ledger_store
        self.on_hand_source = on_hand_source
        self.default_method = ValuationMethod.parse(default_method)

    # =========================================================================
    # Single product
    # =========================================================================

    def compute_valuation(
        self,
        product_id: int,
        qty_on_hand: Decimal | int | str,
        method: ValuationMethod | str | None = None,
    ) -> ValuationResult:
        """
        Value ``qty_on_hand`` units of a product.

        Args:
            product_id: Product to value.
            qty_on_hand: Authoritative current balance, passed through as-is.
            method: AVERAGE, FIFO or LIFO; the engine default when None.

        Returns:
            ValuationResult.

        Raises:
            UnsupportedMethodError: If method is not recognised.
        """
        resolved = self._resolve_method(method)
        qty = to_decimal(qty_on_hand)

        with LogContext.bind(product_id=str(product_id)):
            logger.debug("valuation_started", extra={
                "method": resolved.value,
                "qty_on_hand": str(qty),
            })

            if not qty.is_finite():
                logger.warning("valuation_qty_not_finite", extra={
                    "method": resolved.value,
                    "qty_on_hand": str(qty),
                })
                result = ValuationResult.zero(product_id, resolved, qty)
            elif qty == ZERO:
                result = ValuationResult.zero(product_id, resolved, qty)
            elif resolved is ValuationMethod.AVERAGE:
                result = self._average(product_id, qty)
            else:
                result = self._layered(product_id, qty, resolved)

            if result.has_unknown_cost:
                logger.warning("valuation_unknown_cost", extra={
                    "method": resolved.value,
                    "qty_on_hand": str(qty),
                })

            logger.info("valuation_completed", extra={
                "method": resolved.value,
                "qty_on_hand": str(qty),
                "value_cents": result.value_cents,
                "avg_cost_cents": result.avg_cost_cents,
                "has_unknown_cost": result.has_unknown_cost,
                "layer_count": len(result.layers),
                "skipped_entries": result.skipped_entries,
                "clamped_entries": result.clamped_entries,
            })

        return result

    def _average(self, product_id: int, qty: Decimal) -> ValuationResult:
        sanitized = sanitize_entries(self.ledger_store.list_entries(product_id))
        avg = compute_average(entries=sanitized.entries, qty_on_hand=qty)

        return ValuationResult(
            product_id=product_id,
            method=ValuationMethod.AVERAGE,
            qty_on_hand=qty,
            value_cents=avg.value_cents,
            avg_cost_cents=avg.avg_cost_cents,
            has_unknown_cost=avg.has_unknown_cost,
            skipped_entries=sanitized.skipped,
            clamped_entries=sanitized.clamped,
        )

    def _layered(
        self,
        product_id: int,
        qty: Decimal,
        method: ValuationMethod,
    ) -> ValuationResult:
        sanitized = sanitize_entries(self.ledger_store.list_entries(product_id))
        replay = build_layers(
            entries=sanitized.entries,
            policy=_POLICY_BY_METHOD[method],
        )

        total_qty = replay.total_quantity
        total_value = replay.total_value_cents
        avg_cost_cents = round_cents(total_value / total_qty) if total_qty > ZERO else 0

        if qty < ZERO:
            logger.info("valuation_negative_stock", extra={
                "method": method.value,
                "qty_on_hand": str(qty),
            })
            value_cents = 0
        else:
            value_cents = round_cents(total_value)

        if replay.has_receipts and total_qty != qty:
            # Expected for oversold or unreconciled stock; reported, not corrected
            logger.debug("valuation_layers_differ_from_on_hand", extra={
                "method": method.value,
                "qty_on_hand": str(qty),
                "layer_quantity": str(total_qty),
            })

        return ValuationResult(
            product_id=product_id,
            method=method,
            qty_on_hand=qty,
            value_cents=value_cents,
            avg_cost_cents=avg_cost_cents,
            has_unknown_cost=not replay.has_receipts,
            fifo_layers=replay.layers if method is ValuationMethod.FIFO else (),
            lifo_layers=replay.layers if method is ValuationMethod.LIFO else (),
            unmatched_consumption=replay.unmatched_consumption,
            skipped_entries=sanitized.skipped,
            clamped_entries=sanitized.clamped,
        )

    # =========================================================================
    # Many products
    # =========================================================================

    def get_stock_on_hand(self, product_id: int) -> Decimal:
        """Authoritative on-hand quantity from the OnHandSource."""
        return self._require_on_hand("get_stock_on_hand").get_qty_on_hand(product_id)

    def compute_bulk_valuation(
        self,
        product_ids: Iterable[int],
        method: ValuationMethod | str | None = None,
    ) -> dict[int, ValuationResult]:
        """
        Value several products, reading each on-hand quantity from the source.

        Raises:
            UnsupportedMethodError: If method is not recognised.
            OnHandSourceMissingError: If no OnHandSource was supplied.
        """
        resolved = self._resolve_method(method)
        source = self._require_on_hand("compute_bulk_valuation")

        results: dict[int, ValuationResult] = {}
        for product_id in product_ids:
            results[product_id] = self.compute_valuation(
                product_id, source.get_qty_on_hand(product_id), resolved
            )
        return results

    def get_total_inventory_value(
        self,
        method: ValuationMethod | str | None = None,
    ) -> InventoryValuationSummary:
        """
        Total value of all active products with positive stock.

        Raises:
            UnsupportedMethodError: If method is not recognised.
            OnHandSourceMissingError: If no OnHandSource was supplied.
        """
        resolved = self._resolve_method(method)
        source = self._require_on_hand("get_total_inventory_value")

        product_ids = source.list_active_product_ids()
        total_value = 0
        valued = 0
        unknown = 0

        for product_id in product_ids:
            qty = source.get_qty_on_hand(product_id)
            if not qty.is_finite() or qty <= ZERO:
                continue
            result = self.compute_valuation(product_id, qty, resolved)
            valued += 1
            total_value += result.value_cents
            if result.has_unknown_cost:
                unknown += 1

        summary = InventoryValuationSummary(
            method=resolved,
            total_value_cents=total_value,
            total_products=len(product_ids),
            products_valued=valued,
            products_with_unknown_cost=unknown,
        )

        logger.info("inventory_valuation_completed", extra=summary.to_dict())
        return summary

    # =========================================================================
    # Helpers
    # =========================================================================

    def _resolve_method(self, method: ValuationMethod | str | None) -> ValuationMethod:
        if method is None:
            return self.default_method
        return ValuationMethod.parse(method)

    def _require_on_hand(self, operation: str) -> OnHandSource:
        if self.on_hand_source is None:
            raise OnHandSourceMissingError(operation)
        return self.on_hand_source


def build_valuation_engine(
    session: Session,
    config: InventoryConfig | None = None,
) -> ValuationEngine:
    """Build a ValuationEngine from config (single entrypoint for production).

    Wires a LedgerSelector as the ledger store and picks the on-hand source
    named by ``valuation.on_hand_source``: the products table, or the
    ledger sum for deployments that keep no stock column.

    Args:
        session: SQLAlchemy session.
        config: Loaded configuration; ``get_active_config()`` when None.

    Returns:
        ValuationEngine using the configured default method.
    """
    from inventory_config import get_active_config
    from inventory_config.schema import ON_HAND_FROM_LEDGER
    from inventory_kernel.selectors import (
        LedgerOnHandSource,
        LedgerSelector,
        ProductSelector,
    )

    config = config or get_active_config()
    ledger = LedgerSelector(session)

    on_hand: OnHandSource
    if config.valuation.on_hand_source == ON_HAND_FROM_LEDGER:
        on_hand = LedgerOnHandSource(ledger)
    else:
        on_hand = ProductSelector(session)

    logger.info("valuation_engine_built", extra={
        "default_method": config.valuation.default_method,
        "on_hand_source": config.valuation.on_hand_source,
        "config_checksum": config.checksum,
    })

    return ValuationEngine(
        ledger_store=ledger,
        on_hand_source=on_hand,
        default_method=config.valuation.default_method,
    )
