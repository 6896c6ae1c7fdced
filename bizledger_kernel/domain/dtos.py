"""
Pure data transfer objects shared by selectors and report builders.

All DTOs are frozen dataclasses.  They are the bridge between the ORM layer
and the pure statement functions: nothing downstream of a selector touches an
ORM instance.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from bizledger_kernel.models.account import AccountType


@dataclass(frozen=True)
class AccountInfo:
    """
    Snapshot of account metadata needed for classification.

    Guarantees:
        - account_type is always a valid AccountType member.
    """

    account_id: UUID
    code: str
    name: str
    account_type: AccountType


@dataclass(frozen=True)
class AccountBalanceRow:
    """Raw debit/credit totals for one account over some date range."""

    account: AccountInfo
    debit_total: Decimal
    credit_total: Decimal


@dataclass(frozen=True)
class AccountTypeTotal:
    """Debit/credit totals summed over every account of one type."""

    account_type: AccountType
    debit_total: Decimal
    credit_total: Decimal


@dataclass(frozen=True)
class MonthlyTypeTotal:
    """Debit/credit totals for one (month, account type, is-COGS) group."""

    year: int
    month: int
    account_type: AccountType
    is_cogs: bool
    debit_total: Decimal
    credit_total: Decimal


@dataclass(frozen=True)
class LotSnapshot:
    """An active inventory lot as read for aging."""

    lot_id: UUID
    product_id: UUID
    product_name: str
    sku: str | None
    batch_number: str | None
    quantity: Decimal
    cost_price: Decimal
    created_at: datetime
    expiry_date: date | None = None


@dataclass(frozen=True)
class LedgerMovement:
    """One inventory ledger line as read for valuation replay."""

    product_id: UUID
    product_name: str
    quantity_change: Decimal
    unit_cost: Decimal | None
    created_at: datetime
