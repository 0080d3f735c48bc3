"""
Inventory valuation configuration schema.

Frozen dataclasses that the loader fills from YAML.  These are plain data:
validation of allowed values happens in ``inventory_config.loader``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# On-hand quantity sources
ON_HAND_FROM_PRODUCTS = "products"
ON_HAND_FROM_LEDGER = "ledger"
ON_HAND_SOURCES = (ON_HAND_FROM_PRODUCTS, ON_HAND_FROM_LEDGER)


@dataclass(frozen=True)
class ValuationSettings:
    """How the valuation engine is wired."""

    default_method: str = "FIFO"
    on_hand_source: str = ON_HAND_FROM_PRODUCTS


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class DatabaseSettings:
    url: str = "sqlite:///inventory.db"
    echo: bool = False


@dataclass(frozen=True)
class InventoryConfig:
    """The runtime configuration artifact returned by get_active_config()."""

    valuation: ValuationSettings = field(default_factory=ValuationSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    source_path: str = ""
    checksum: str = ""
