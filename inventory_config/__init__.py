"""
inventory_config -- single public entrypoint for valuation configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    directly.

Architecture position:
    Configuration -- YAML-driven.  Sits above ``inventory_kernel`` and below
    ``inventory_services``.  The kernel and engines MUST NEVER import from
    ``inventory_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``ConfigurationError`` -- a value is not allowed.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``INVENTORY_CONFIG_TRACE`` log entry with the source path and checksum,
    tying valuation reports to the configuration that produced them.
"""

from __future__ import annotations

import logging
from pathlib import Path

from inventory_config.loader import load_yaml_file, log_level, parse_config
from inventory_config.schema import InventoryConfig

_logger = logging.getLogger("inventory_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "InventoryConfig",
    "get_active_config",
    "log_level",
]


def get_active_config(config_path: Path | str | None = None) -> InventoryConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to the packaged
            ``defaults.yaml``.

    Returns:
        InventoryConfig -- frozen, validated.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If a value is invalid.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_config(load_yaml_file(path), str(path))

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "config_path": config.source_path,
            "checksum": config.checksum,
            "default_method": config.valuation.default_method,
            "on_hand_source": config.valuation.on_hand_source,
        },
    )

    return config
