"""
Tests for the SQL-backed ledger and product selectors, and for valuing
products end to end through them.
"""

from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from inventory_config.loader import parse_config
from inventory_kernel.domain.ledger import LedgerStore, OnHandSource
from inventory_kernel.models import ProductModel, StockLedgerModel
from inventory_kernel.selectors import LedgerOnHandSource, LedgerSelector, ProductSelector
from inventory_services import ValuationEngine, build_valuation_engine
from tests.builders import at


def _product(session: Session, sku: str, qty_on_hand, is_active: bool = True) -> ProductModel:
    product = ProductModel(sku=sku, name=sku.title(), qty_on_hand=Decimal(str(qty_on_hand)), is_active=is_active)
    session.add(product)
    session.flush()
    return product


def _move(session: Session, product: ProductModel, quantity, cost, minutes: int, reason: str = "GRN") -> StockLedgerModel:
    row = StockLedgerModel(
        product_id=product.id,
        quantity=Decimal(str(quantity)),
        unit_cost_cents=Decimal(str(cost)),
        reason=reason,
        created_at=at(minutes),
    )
    session.add(row)
    session.flush()
    return row


class TestLedgerSelector:

    def test_satisfies_protocols(self, session: Session):
        assert isinstance(LedgerSelector(session), LedgerStore)
        assert isinstance(ProductSelector(session), OnHandSource)
        assert isinstance(LedgerOnHandSource(LedgerSelector(session)), OnHandSource)

    def test_entries_ordered_by_time_then_insertion(self, session: Session):
        widget = _product(session, "widget", 0)
        late = _move(session, widget, 5, 300, 10)
        first = _move(session, widget, 1, 100, 0)
        second = _move(session, widget, 2, 200, 0)

        entries = LedgerSelector(session).list_entries(widget.id)

        assert [e.entry_id for e in entries] == [first.id, second.id, late.id]
        assert [e.quantity for e in entries] == [Decimal("1"), Decimal("2"), Decimal("5")]
        assert all(isinstance(e.unit_cost_cents, Decimal) for e in entries)

    def test_entries_scoped_to_product(self, session: Session):
        widget = _product(session, "widget", 0)
        gadget = _product(session, "gadget", 0)
        _move(session, widget, 1, 100, 0)
        _move(session, gadget, 7, 100, 0)

        entries = LedgerSelector(session).list_entries(widget.id)

        assert len(entries) == 1
        assert entries[0].product_id == widget.id

    def test_unknown_product_has_no_entries(self, session: Session):
        assert LedgerSelector(session).list_entries(999) == ()

    def test_sum_quantity(self, session: Session):
        widget = _product(session, "widget", 0)
        _move(session, widget, 10, 100, 0)
        _move(session, widget, -4, 0, 1, reason="SALE")

        selector = LedgerSelector(session)

        assert selector.sum_quantity(widget.id) == Decimal("6")
        assert selector.sum_quantity(999) == Decimal("0")
        assert selector.list_product_ids() == [widget.id]

    def test_active_only_drops_inactive_products(self, session: Session):
        widget = _product(session, "widget", 0)
        retired = _product(session, "retired", 0, is_active=False)
        _move(session, widget, 10, 100, 0)
        _move(session, retired, 10, 100, 0)

        selector = LedgerSelector(session)

        assert selector.list_product_ids() == [widget.id, retired.id]
        assert selector.list_product_ids(active_only=True) == [widget.id]
        assert LedgerOnHandSource(selector).list_active_product_ids() == [widget.id]


class TestProductSelector:

    def test_qty_on_hand(self, session: Session):
        widget = _product(session, "widget", "12.5")

        selector = ProductSelector(session)

        assert selector.get_qty_on_hand(widget.id) == Decimal("12.5")
        assert selector.get_qty_on_hand(999) == Decimal("0")

    def test_active_products_only(self, session: Session):
        widget = _product(session, "widget", 1)
        _product(session, "retired", 1, is_active=False)
        gadget = _product(session, "gadget", 1)

        assert ProductSelector(session).list_active_product_ids() == [widget.id, gadget.id]


class TestValuationThroughDatabase:

    @pytest.fixture
    def stocked(self, session: Session):
        widget = _product(session, "widget", 100)
        _move(session, widget, 100, 1000, 0)
        _move(session, widget, 50, 1200, 1)
        _move(session, widget, -30, 0, 2, reason="SALE")
        _move(session, widget, -20, 0, 3, reason="SALE")
        empty = _product(session, "empty", 4)
        session.commit()
        return widget, empty

    def test_fifo_and_lifo(self, session: Session, stocked):
        widget, _ = stocked
        engine = ValuationEngine(LedgerSelector(session), ProductSelector(session))
        qty = engine.get_stock_on_hand(widget.id)

        fifo = engine.compute_valuation(widget.id, qty, "FIFO")
        lifo = engine.compute_valuation(widget.id, qty, "LIFO")

        assert fifo.value_cents == 110000
        assert [layer.quantity for layer in fifo.fifo_layers] == [Decimal("50"), Decimal("50")]
        assert lifo.value_cents == 100000

    def test_factory_reads_products_table(self, session: Session, stocked):
        widget, empty = stocked
        config = parse_config({"valuation": {"default_method": "average"}})

        engine = build_valuation_engine(session, config)
        summary = engine.get_total_inventory_value()

        assert isinstance(engine.on_hand_source, ProductSelector)
        assert summary.total_value_cents == 106700
        assert summary.products_valued == 2
        assert summary.products_with_unknown_cost == 1

    def test_factory_can_derive_stock_from_ledger(self, session: Session, stocked):
        widget, empty = stocked
        config = parse_config({"valuation": {"on_hand_source": "ledger"}})

        engine = build_valuation_engine(session, config)
        results = engine.compute_bulk_valuation([widget.id, empty.id])

        assert isinstance(engine.on_hand_source, LedgerOnHandSource)
        assert results[widget.id].qty_on_hand == Decimal("100")
        assert results[widget.id].value_cents == 110000
        assert results[empty.id].value_cents == 0
        assert results[empty.id].has_unknown_cost is False

    def test_ledger_totals_skip_inactive_products(self, session: Session):
        widget = _product(session, "widget", 0)
        retired = _product(session, "retired", 0, is_active=False)
        _move(session, widget, 10, 100, 0)
        _move(session, retired, 10, 100, 0)
        session.commit()
        config = parse_config({"valuation": {"on_hand_source": "ledger"}})

        summary = build_valuation_engine(session, config).get_total_inventory_value("FIFO")

        assert summary.total_value_cents == 1000
        assert summary.total_products == 1
        assert summary.products_valued == 1
