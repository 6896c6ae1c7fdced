"""
Module: bizledger_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import bizledger_kernel.domain, db.types and logging.
    MUST NOT import bizledger_reporting.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Instants and dates are passed in by the caller.
    - Decimal-only arithmetic.
    - Determinism: identical inputs always produce identical outputs.
"""

from bizledger_engines.aging import (
    STOCK_AGING_BUCKETS,
    AgeBucket,
    AgedLot,
    BucketTotal,
    StockAgingResult,
    age_lots,
    calculate_age_days,
    classify,
)
from bizledger_engines.periods import (
    MonthWindow,
    shift_month,
    trailing_months,
    window_bounds,
)
from bizledger_engines.tracer import compute_input_fingerprint, traced_engine
from bizledger_engines.valuation import (
    InventoryValuationResult,
    ProductValuation,
    replay_inventory_ledger,
    valuation_cutoff,
)

__all__ = [
    "AgeBucket",
    "AgedLot",
    "BucketTotal",
    "StockAgingResult",
    "STOCK_AGING_BUCKETS",
    "age_lots",
    "calculate_age_days",
    "classify",
    "MonthWindow",
    "shift_month",
    "trailing_months",
    "window_bounds",
    "InventoryValuationResult",
    "ProductValuation",
    "replay_inventory_ledger",
    "valuation_cutoff",
    "traced_engine",
    "compute_input_fingerprint",
]
