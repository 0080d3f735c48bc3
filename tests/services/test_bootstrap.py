"""
Tests for startup from configuration (inventory_services/bootstrap.py).

The logging and database sections of the config must actually take effect.
"""

import logging

import pytest
from sqlalchemy import inspect

from inventory_config.loader import parse_config
from inventory_kernel.db import get_engine, session_scope
from inventory_kernel.db.engine import reset_engine
from inventory_kernel.logging_config import configure_logging, reset_logging
from inventory_services import bootstrap, build_valuation_engine


@pytest.fixture
def fresh_process():
    """Start without kernel logging or engine; restore the suite's logging after."""
    reset_logging()
    reset_engine()
    yield
    reset_engine()
    reset_logging()
    configure_logging(level=logging.DEBUG)


class TestBootstrap:

    def test_applies_logging_and_database_sections(self, fresh_process):
        config = parse_config({
            "logging": {"level": "warning"},
            "database": {"url": "sqlite://", "echo": True},
        })

        applied = bootstrap(config, create_schema=True)

        engine = get_engine()
        assert applied is config
        assert logging.getLogger("inventory_kernel").level == logging.WARNING
        assert engine.url.get_backend_name() == "sqlite"
        assert engine.echo is True
        assert inspect(engine).has_table("stock_ledger")
        assert inspect(engine).has_table("products")

    def test_schema_not_created_unless_asked(self, fresh_process):
        bootstrap(parse_config({"database": {"url": "sqlite://"}}))

        assert not inspect(get_engine()).has_table("stock_ledger")

    def test_loads_config_file(self, fresh_process, tmp_path):
        path = tmp_path / "inventory.yaml"
        path.write_text(
            "valuation:\n"
            "  default_method: LIFO\n"
            "logging:\n"
            "  level: ERROR\n"
            "database:\n"
            "  url: 'sqlite://'\n"
        )

        config = bootstrap(config_path=path, create_schema=True)

        assert config.valuation.default_method == "LIFO"
        assert logging.getLogger("inventory_kernel").level == logging.ERROR
        with session_scope() as session:
            engine = build_valuation_engine(session, config)
            assert engine.default_method.value == "LIFO"
            assert engine.get_total_inventory_value().total_products == 0
