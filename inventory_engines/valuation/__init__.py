"""
Valuation - Pure ledger replay and cost calculation for AVERAGE/FIFO/LIFO.

Pure functions and value objects only.  The orchestrating ValuationEngine,
which reads the ledger store, lives in inventory_services.valuation_service.
"""

from inventory_engines.valuation.average_cost import AverageCostResult, compute_average
from inventory_engines.valuation.cost_layer import (
    ConsumptionPolicy,
    CostLayer,
    LayerReplay,
    LayerSnapshot,
)
from inventory_engines.valuation.layer_builder import build_layers
from inventory_engines.valuation.result import InventoryValuationSummary, ValuationResult
from inventory_engines.valuation.sanitize import SanitizedEntries, sanitize_entries

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
