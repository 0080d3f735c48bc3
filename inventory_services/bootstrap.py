"""
inventory_services.bootstrap -- Process startup from configuration.

Responsibility:
    Apply the ``logging`` and ``database`` sections of an InventoryConfig:
    attach the structured JSON handler at the configured level and create
    the kernel's SQLAlchemy engine.  Valuation engines are then built per
    session with ``build_valuation_engine``.

Architecture position:
    Services -- the one place configuration reaches kernel infrastructure.

Usage:
    config = bootstrap()
    with session_scope() as session:
        summary = build_valuation_engine(session, config).get_total_inventory_value()
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from inventory_kernel.db.engine import create_tables, init_engine_from_url
from inventory_kernel.logging_config import configure_logging, get_logger

if TYPE_CHECKING:
    from inventory_config import InventoryConfig

logger = get_logger("services.bootstrap")


def bootstrap(
    config: InventoryConfig | None = None,
    config_path: Path | str | None = None,
    create_schema: bool = False,
) -> InventoryConfig:
    """Configure logging and the database engine from configuration.

    Args:
        config: Already loaded configuration.  Loaded with
            ``get_active_config(config_path)`` when None.
        config_path: YAML file to load when ``config`` is not given.
        create_schema: Create any missing kernel tables.

    Returns:
        The configuration that was applied.
    """
    from inventory_config import get_active_config, log_level

    config = config or get_active_config(config_path)

    configure_logging(level=log_level(config))
    init_engine_from_url(config.database.url, echo=config.database.echo)
    if create_schema:
        create_tables()

    logger.info("inventory_bootstrapped", extra={
        "config_path": config.source_path,
        "config_checksum": config.checksum,
        "log_level": config.logging.level,
        "database_echo": config.database.echo,
    })
    return config
