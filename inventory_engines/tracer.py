"""
inventory_engines.tracer -- INVENTORY_ENGINE_TRACE records for engine calls.

``@traced_engine`` wraps a pure valuation engine and, after each call,
logs one record naming the engine, its version, how long the call took and
a short fingerprint of the inputs that determine its result.  Ledger entries
and other dataclasses are fingerprinted field by field.  Two calls with
the same fingerprinted inputs always carry the same fingerprint, so traces
from separate runs can be matched up.

The decorator never touches the engine's inputs or result.

Usage:
    @traced_engine("layer_builder", "1.0", fingerprint_fields=("entries", "policy"))
    def build_layers(entries, policy):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Iterator, Mapping
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

FINGERPRINT_LENGTH = 16


def _canonical(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return "null"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _canonical(
            {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
        )
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        # 2.50 and 2.5 are the same input
        return format(value.normalize(), "f") if value.is_finite() else str(value)
    if isinstance(value, Mapping):
        body = ",".join(f"{key}:{_canonical(value[key])}" for key in sorted(value))
        return "{" + body + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonical(item) for item in value) + "]"
    if isinstance(value, Iterator):
        # One-shot iterators stay unread
        return f"<{type(value).__name__}>"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Hash the named arguments; absent names hash like None."""
    canonical = "|".join(
        f"{name}={_canonical(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Emit INVENTORY_ENGINE_TRACE after every call of the decorated engine.

    Args:
        engine_name: Engine identifier, e.g. "layer_builder".
        engine_version: Engine version, e.g. "1.0".
        fingerprint_fields: Parameter names whose values feed the
            input fingerprint, whether passed positionally or by keyword.
    """

    def decorator(func: Callable) -> Callable:
        parameter_names = tuple(inspect.signature(func).parameters)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                arguments = dict(zip(parameter_names, args))
                arguments.update(kwargs)
                fingerprint = compute_input_fingerprint(fingerprint_fields, arguments)

            started = time.monotonic()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.monotonic() - started) * 1000, 2)

            logger.info(
                "INVENTORY_ENGINE_TRACE",
                extra={
                    "trace_type": "INVENTORY_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fingerprint,
                    "duration_ms": elapsed_ms,
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
