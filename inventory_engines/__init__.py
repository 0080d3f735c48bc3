"""
Module: inventory_engines
Responsibility:
    Package entrypoint that re-exports the pure valuation engines.  This is
    the canonical import surface for inventory_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain and inventory_kernel.logging_config.
    MUST NOT import SQLAlchemy, kernel db/models/selectors, services or config.

Invariants enforced:
    - Purity: engines never read the clock or the environment.
    - Decimal-only arithmetic for quantities and costs.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from inventory_engines import ConsumptionPolicy, build_layers, compute_average
"""

from inventory_engines.valuation import (
    AverageCostResult,
    ConsumptionPolicy,
    CostLayer,
    InventoryValuationSummary,
    LayerReplay,
    LayerSnapshot,
    SanitizedEntries,
    ValuationResult,
    build_layers,
    compute_average,
    sanitize_entries,
)

__all__ = [
    "AverageCostResult",
    "ConsumptionPolicy",
    "CostLayer",
    "InventoryValuationSummary",
    "LayerReplay",
    "LayerSnapshot",
    "SanitizedEntries",
    "ValuationResult",
    "build_layers",
    "compute_average",
    "sanitize_entries",
]
