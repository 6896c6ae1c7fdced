"""
bizledger_engines.valuation -- Point-in-time inventory valuation by ledger replay.

Responsibility:
    Reconstruct per-product stock quantity and carried value at a cutoff
    instant by summing signed inventory ledger movements.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Cutoff is applied here, not only in the query: a movement created
      after the cutoff never affects the result, whatever the caller passes.
    - quantity = SUM(quantity_change); value = SUM(quantity_change *
      unit_cost) where a NULL unit_cost (transfers) contributes zero value.
    - Products whose cumulative quantity is exactly zero are excluded.
    - Deterministic ordering: by product name, then product id.

Failure modes:
    (none) -- an empty movement list yields an empty valuation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from bizledger_engines.tracer import traced_engine
from bizledger_kernel.db.types import ensure_utc
from bizledger_kernel.domain.dtos import LedgerMovement
from bizledger_kernel.logging_config import get_logger

logger = get_logger("engines.valuation")


@dataclass(frozen=True, slots=True)
class ProductValuation:
    """Stock on hand and carried value of one product at the cutoff."""

    product_id: UUID
    product_name: str
    quantity: Decimal
    value: Decimal


@dataclass(frozen=True, slots=True)
class InventoryValuationResult:
    cutoff: datetime
    products: tuple[ProductValuation, ...]

    @property
    def total_value(self) -> Decimal:
        return sum((p.value for p in self.products), Decimal("0"))


def valuation_cutoff(as_of: date | datetime) -> datetime:
    """
    Normalize a cutoff to an aware UTC instant.

    A bare ``date`` means the end of that day, so every movement stamped on
    that date is included.
    """
    if isinstance(as_of, datetime):
        return ensure_utc(as_of)
    return datetime.combine(as_of, time.max, tzinfo=timezone.utc)


@traced_engine("inventory_valuation", "1.0", fingerprint_fields=("cutoff",))
def replay_inventory_ledger(
    *,
    movements: Sequence[LedgerMovement],
    cutoff: datetime,
) -> InventoryValuationResult:
    """
    Replay movements up to ``cutoff`` and value each product.

    Args:
        movements: Ledger lines in any order.
        cutoff: Aware instant; lines with created_at <= cutoff count.
    """
    cutoff = ensure_utc(cutoff)
    quantities: dict[UUID, Decimal] = {}
    values: dict[UUID, Decimal] = {}
    names: dict[UUID, str] = {}
    skipped = 0

    for movement in movements:
        if ensure_utc(movement.created_at) > cutoff:
            skipped += 1
            continue
        pid = movement.product_id
        names[pid] = movement.product_name
        quantities[pid] = quantities.get(pid, Decimal("0")) + movement.quantity_change
        if movement.unit_cost is not None:
            values[pid] = (
                values.get(pid, Decimal("0"))
                + movement.quantity_change * movement.unit_cost
            )

    if skipped:
        logger.debug("valuation_future_movements_ignored", extra={
            "skipped": skipped,
            "cutoff": cutoff.isoformat(),
        })

    products = [
        ProductValuation(
            product_id=pid,
            product_name=names[pid],
            quantity=qty,
            value=values.get(pid, Decimal("0")),
        )
        for pid, qty in quantities.items()
        if qty != 0
    ]
    products.sort(key=lambda p: (p.product_name, str(p.product_id)))

    return InventoryValuationResult(cutoff=cutoff, products=tuple(products))
