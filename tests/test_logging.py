"""JSON logging and log context behaviour."""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from inventory_kernel.exceptions import UnsupportedMethodError
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def emitted():
    """Configure logging onto a buffer; calling the fixture returns parsed lines."""
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    configure_logging(handler=handler, level=logging.DEBUG)

    def lines() -> list[dict]:
        return [json.loads(line) for line in buffer.getvalue().splitlines() if line]

    return lines


class TestRecordShape:

    def test_standard_keys(self, emitted):
        get_logger("services.valuation").info("valuation_completed")

        [record] = emitted()
        assert record["level"] == "INFO"
        assert record["message"] == "valuation_completed"
        assert record["logger"] == "inventory_kernel.services.valuation"
        assert record["ts"].endswith("+00:00")

    def test_extra_is_flattened_into_record(self, emitted):
        get_logger("t").info("valued", extra={"value_cents": 1200, "method": "LIFO"})

        [record] = emitted()
        assert record["value_cents"] == 1200
        assert record["method"] == "LIFO"

    def test_decimal_rendered_as_string(self, emitted):
        get_logger("t").info("qty", extra={"qty_on_hand": Decimal("3.250")})

        assert emitted()[0]["qty_on_hand"] == "3.250"

    def test_formatter_usable_on_its_own(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "plain %s", ("text",), None)

        parsed = json.loads(StructuredFormatter().format(record))

        assert parsed["message"] == "plain text"
        assert parsed["level"] == "WARNING"


class TestExceptions:

    def test_plain_exception(self, emitted):
        try:
            raise RuntimeError("ledger unavailable")
        except RuntimeError:
            get_logger("t").exception("load_failed")

        [record] = emitted()
        assert record["exc_type"] == "RuntimeError"
        assert record["exc_message"] == "ledger unavailable"
        assert "Traceback" in record["traceback"]
        assert "exc_code" not in record

    def test_kernel_error_code_and_attributes(self, emitted):
        try:
            raise UnsupportedMethodError("HIFO")
        except UnsupportedMethodError:
            get_logger("t").error("valuation_rejected", exc_info=True)

        [record] = emitted()
        assert record["exc_type"] == "UnsupportedMethodError"
        assert record["exc_code"] == "UNSUPPORTED_VALUATION_METHOD"
        assert record["exc_method"] == "HIFO"


class TestContext:

    def test_context_lands_in_records(self, emitted):
        LogContext.set(correlation_id="run-7")
        with LogContext.bind(product_id=17):
            get_logger("t").info("inside")
        get_logger("t").info("outside")

        inside, outside = emitted()
        assert inside["product_id"] == "17"
        assert inside["correlation_id"] == "run-7"
        assert "product_id" not in outside
        assert outside["correlation_id"] == "run-7"

    def test_nested_bind_restores_outer_value(self):
        with LogContext.bind(product_id=1):
            with LogContext.bind(product_id=2):
                assert LogContext.get_all() == {"product_id": "2"}
            assert LogContext.get_all() == {"product_id": "1"}
        assert LogContext.get_all() == {}

    def test_bind_restores_after_exception(self):
        with pytest.raises(ValueError):
            with LogContext.bind(trace_id="t-1"):
                raise ValueError
        assert LogContext.get_all() == {}

    def test_none_values_are_ignored(self):
        LogContext.set(actor_id=None, request_id="r")
        with LogContext.bind(product_id=None):
            assert LogContext.get_all() == {"request_id": "r"}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            LogContext.set(warehouse="north")

    def test_clear_drops_everything(self):
        LogContext.set(**{name: name.upper() for name in LogContext.FIELDS})
        assert len(LogContext.get_all()) == len(LogContext.FIELDS)

        LogContext.clear()

        assert LogContext.get_all() == {}


class TestConfiguration:

    def test_second_configure_call_is_ignored(self):
        first, second = logging.NullHandler(), logging.NullHandler()

        configure_logging(handler=first)
        configure_logging(handler=second)

        handlers = logging.getLogger("inventory_kernel").handlers
        assert first in handlers
        assert second not in handlers

    def test_level_filters_records(self):
        buffer = StringIO()
        configure_logging(handler=logging.StreamHandler(buffer))

        get_logger("t").debug("hidden")
        get_logger("t").info("shown")

        messages = [json.loads(l)["message"] for l in buffer.getvalue().splitlines()]
        assert messages == ["shown"]

    def test_records_do_not_reach_root_logger(self):
        configure_logging(handler=logging.NullHandler())

        assert logging.getLogger("inventory_kernel").propagate is False

    def test_reset_removes_installed_handler_only(self):
        root = logging.getLogger("inventory_kernel")
        installed, foreign = logging.NullHandler(), logging.NullHandler()
        root.addHandler(foreign)
        configure_logging(handler=installed)

        try:
            reset_logging()

            assert installed not in root.handlers
            assert foreign in root.handlers
        finally:
            root.removeHandler(foreign)
