"""
Inventory Kernel

Read-side foundation for inventory valuation:
- Append-only stock ledger (models + read-only selectors)
- Decimal-only quantities and half-away-from-zero cents rounding
- Typed exceptions with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
