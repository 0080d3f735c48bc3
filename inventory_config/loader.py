"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen
``inventory_config.schema`` dataclasses.  Callers use
``inventory_config.get_active_config()``; nothing else should call this
module directly.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Unknown valuation methods, on-hand sources and log levels are rejected
  with ``ConfigurationError``; missing sections fall back to the schema
  defaults.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Bad value  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import (
    ON_HAND_SOURCES,
    DatabaseSettings,
    InventoryConfig,
    LoggingSettings,
    ValuationSettings,
)
from inventory_kernel.domain.valuation import ValuationMethod
from inventory_kernel.exceptions import ConfigurationError, UnsupportedMethodError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_valuation(data: dict[str, Any], path: str) -> ValuationSettings:
    """Parse the ``valuation`` section."""
    defaults = ValuationSettings()
    raw_method = data.get("default_method", defaults.default_method)
    try:
        method = ValuationMethod.parse(raw_method)
    except UnsupportedMethodError as e:
        raise ConfigurationError(path, f"valuation.default_method: {e}") from e

    source = str(data.get("on_hand_source", defaults.on_hand_source)).lower()
    if source not in ON_HAND_SOURCES:
        raise ConfigurationError(
            path,
            f"valuation.on_hand_source must be one of {ON_HAND_SOURCES}, got {source!r}",
        )
    return ValuationSettings(default_method=method.value, on_hand_source=source)


def parse_logging(data: dict[str, Any], path: str) -> LoggingSettings:
    """Parse the ``logging`` section."""
    level = str(data.get("level", LoggingSettings().level)).upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(path, f"logging.level must be one of {_LOG_LEVELS}, got {level!r}")
    return LoggingSettings(level=level)


def parse_database(data: dict[str, Any], path: str) -> DatabaseSettings:
    """Parse the ``database`` section."""
    defaults = DatabaseSettings()
    url = data.get("url", defaults.url)
    if not isinstance(url, str) or not url:
        raise ConfigurationError(path, "database.url must be a non-empty string")
    return DatabaseSettings(url=url, echo=bool(data.get("echo", defaults.echo)))


def parse_config(data: dict[str, Any], path: str = "<memory>") -> InventoryConfig:
    """
    Parse a full configuration mapping.

    Raises:
        ConfigurationError: if a section is not a mapping or holds a bad value.
    """
    sections: dict[str, dict[str, Any]] = {}
    for name in ("valuation", "logging", "database"):
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(path, f"section {name!r} must be a mapping")
        sections[name] = section

    return InventoryConfig(
        valuation=parse_valuation(sections["valuation"], path),
        logging=parse_logging(sections["logging"], path),
        database=parse_database(sections["database"], path),
        source_path=path,
        checksum=compute_checksum(data),
    )


def log_level(config: InventoryConfig) -> int:
    """The configured level as a ``logging`` constant."""
    return logging.getLevelName(config.logging.level)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
