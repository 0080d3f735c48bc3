"""
inventory_services -- Package init and public API.

Responsibility:
    Orchestration services that compose the pure valuation engines
    (inventory_engines/) with ledger stores, on-hand sources and database
    sessions.  This is the only layer that may hold a database session.

Architecture position:
    Services -- orchestration over engines + kernel.

    Dependency direction (enforced by tests/architecture/test_import_boundaries.py):
        inventory_services/ -> inventory_engines/  (allowed)
        inventory_services/ -> inventory_kernel/   (allowed)
        inventory_services/ -> inventory_config/   (allowed)
        inventory_engines/  -> inventory_services/ (FORBIDDEN)
        inventory_kernel/   -> inventory_services/ (FORBIDDEN)
"""

from inventory_services.bootstrap import bootstrap
from inventory_services.valuation_service import ValuationEngine, build_valuation_engine

__all__ = [
    "bootstrap",
    "ValuationEngine",
    "build_valuation_engine",
]
