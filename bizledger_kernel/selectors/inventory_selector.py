"""
Module: bizledger_kernel.selectors.inventory_selector
Responsibility: Read-only inventory queries: active lots for aging and the
    signed movement log for point-in-time valuation.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Business scoping on every query.
    - ``active_lots`` returns only lots with is_active and quantity > 0.
    - ``ledger_movements`` never returns a line created after the cutoff.

Failure modes:
    - QueryError on any driver failure.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from bizledger_kernel.db.types import ensure_utc, to_decimal
from bizledger_kernel.domain.dtos import LedgerMovement, LotSnapshot
from bizledger_kernel.models.inventory import (
    InventoryLedgerLine,
    InventoryLot,
    Product,
)
from bizledger_kernel.selectors.base import BaseSelector


class InventorySelector(BaseSelector):
    """Selector for lot and stock-movement reads."""

    def active_lots(self, business_id: UUID) -> list[LotSnapshot]:
        """Active lots with stock on hand, oldest receipt first."""
        stmt = (
            select(
                InventoryLot.id,
                InventoryLot.product_id,
                Product.name,
                Product.sku,
                InventoryLot.batch_number,
                InventoryLot.quantity,
                InventoryLot.cost_price,
                InventoryLot.created_at,
                InventoryLot.expiry_date,
            )
            .join(Product, InventoryLot.product_id == Product.id)
            .where(
                InventoryLot.business_id == business_id,
                InventoryLot.is_active.is_(True),
                InventoryLot.quantity > 0,
            )
            .order_by(InventoryLot.created_at, InventoryLot.id)
        )

        rows = self._execute("active_lots", stmt)
        return [
            LotSnapshot(
                lot_id=row.id,
                product_id=row.product_id,
                product_name=row.name,
                sku=row.sku,
                batch_number=row.batch_number,
                quantity=to_decimal(row.quantity),
                cost_price=to_decimal(row.cost_price),
                created_at=ensure_utc(row.created_at),
                expiry_date=row.expiry_date,
            )
            for row in rows
        ]

    def ledger_movements(
        self,
        business_id: UUID,
        cutoff: datetime,
    ) -> list[LedgerMovement]:
        """
        Inventory ledger lines created at or before ``cutoff``.

        Args:
            cutoff: Aware datetime; lines with created_at <= cutoff qualify.
        """
        stmt = (
            select(
                InventoryLedgerLine.product_id,
                Product.name,
                InventoryLedgerLine.quantity_change,
                InventoryLedgerLine.unit_cost,
                InventoryLedgerLine.created_at,
            )
            .join(Product, InventoryLedgerLine.product_id == Product.id)
            .where(
                InventoryLedgerLine.business_id == business_id,
                InventoryLedgerLine.created_at <= ensure_utc(cutoff),
            )
            .order_by(InventoryLedgerLine.created_at, InventoryLedgerLine.id)
        )

        rows = self._execute("ledger_movements", stmt)
        return [
            LedgerMovement(
                product_id=row.product_id,
                product_name=row.name,
                quantity_change=to_decimal(row.quantity_change),
                unit_cost=None if row.unit_cost is None else to_decimal(row.unit_cost),
                created_at=ensure_utc(row.created_at),
            )
            for row in rows
        ]
