"""
Module: bizledger_kernel.models.inventory
Responsibility: ORM persistence for products, inventory lots (batches) and
    the signed inventory movement log.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - InventoryLedgerLine is append-only (UPDATE/DELETE blocked).
    - InventoryLot is never deleted; consumption decrements ``quantity`` and
      a lot at zero is soft-deactivated via ``is_active``.
    - Summing quantity_change of a product's ledger lines up to time T
      reconstructs its stock at T.

Audit relevance:
    The ledger lines are the basis for point-in-time valuation; the lots are
    the basis for stock aging.  The two are written together by the stock
    movement code but read independently by the reports.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bizledger_kernel.db.base import Base, UUIDString
from bizledger_kernel.db.types import Money, Quantity


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Product(Base):
    """A stocked item."""

    __tablename__ = "products"

    __table_args__ = (
        UniqueConstraint("business_id", "sku", name="uq_product_business_sku"),
    )

    business_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Product {self.sku}: {self.name}>"


class InventoryLot(Base):
    """
    A discrete batch of stock received at one cost.

    Contract:
        ``quantity`` is the quantity still on hand in this lot.  cost_price is
        the per-unit acquisition cost and does not change.

    Guarantees:
        - created_at is the receipt time and drives stock aging.
        - expiry_date, when set, orders first-expiry-first-out consumption.

    Non-goals:
        - No consumption history; that lives in InventoryLedgerLine.
    """

    __tablename__ = "inventory_lots"

    __table_args__ = (
        Index("idx_lot_business_active", "business_id", "is_active"),
        Index("idx_lot_product_created", "product_id", "created_at"),
    )

    business_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    product_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("products.id"),
        nullable=False,
    )

    batch_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    quantity: Mapped[Quantity] = mapped_column(nullable=False)
    cost_price: Mapped[Money] = mapped_column(nullable=False)

    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<InventoryLot {self.batch_number} qty={self.quantity}>"


class InventoryLedgerLine(Base):
    """
    One signed stock movement.

    Contract:
        quantity_change is positive for receipts and negative for issues.
        unit_cost is NULL for movements that carry no cost (warehouse
        transfers); such lines move quantity but contribute zero value.
    """

    __tablename__ = "inventory_ledger_lines"

    __table_args__ = (
        Index("idx_inv_ledger_business_created", "business_id", "created_at"),
        Index("idx_inv_ledger_product", "product_id"),
    )

    business_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    product_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("products.id"),
        nullable=False,
    )

    warehouse_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    # purchase, sale, adjustment, transfer_in, transfer_out, ...
    transaction_type: Mapped[str] = mapped_column(String(50), nullable=False)

    quantity_change: Mapped[Quantity] = mapped_column(nullable=False)
    unit_cost: Mapped[Money | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<InventoryLedgerLine {self.transaction_type} "
            f"{self.quantity_change}@{self.unit_cost}>"
        )
