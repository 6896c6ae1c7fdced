"""
Financial Reporting Domain Models (``bizledger_reporting.models``).

Responsibility
--------------
Frozen dataclass value objects representing report outputs: trial balance,
income statement, balance sheet, monthly trend, stock aging, inventory
valuation and the accounting summary.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Built by
``bizledger_reporting.statements`` and returned by ``ReportingService``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from bizledger_kernel.domain.dtos import AccountInfo


class ReportType(str, Enum):
    """Types of reports, also used as the envelope key."""

    TRIAL_BALANCE = "trial_balance"
    INCOME_STATEMENT = "income_statement"
    BALANCE_SHEET = "balance_sheet"
    MONTHLY_FINANCIALS = "monthly_financials"
    STOCK_AGING = "stock_aging"
    INVENTORY_VALUATION = "inventory_valuation"
    ACCOUNTING_SUMMARY = "accounting_summary"


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every report."""

    report_type: ReportType
    business_id: UUID
    entity_name: str
    currency: str
    generated_at: str  # ISO format timestamp from injected clock
    as_of_date: date | None = None
    period_start: date | None = None
    period_end: date | None = None


# =========================================================================
# Account-level balances
# =========================================================================


@dataclass(frozen=True)
class AccountBalance:
    """
    Debit/credit totals of one account with its signed net balance.

    net_balance is positive when the account sits on its normal side.
    """

    account: AccountInfo
    total_debit: Decimal
    total_credit: Decimal
    net_balance: Decimal


@dataclass(frozen=True)
class StatementSection:
    label: str
    lines: tuple[AccountBalance, ...]
    total: Decimal


# =========================================================================
# Trial Balance
# =========================================================================


@dataclass(frozen=True)
class TrialBalanceReport:
    metadata: ReportMetadata
    lines: tuple[AccountBalance, ...]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


# =========================================================================
# Income Statement
# =========================================================================


@dataclass(frozen=True)
class IncomeStatementReport:
    """
    Income statement (P&L) for a closed date range.

        Income - COGS = Gross Profit
        Gross Profit - Other Expenses = Net Income
    """

    metadata: ReportMetadata
    income: StatementSection
    cogs: StatementSection
    other_expenses: StatementSection
    total_income: Decimal
    total_cogs: Decimal
    gross_profit: Decimal
    total_other_expense: Decimal
    total_expense: Decimal
    net_income: Decimal


# =========================================================================
# Balance Sheet
# =========================================================================


@dataclass(frozen=True)
class BalanceSheetReport:
    """
    Balance sheet as of a date.

    retained_earnings is the all-time net income up to the date and is
    included in total_equity.
    """

    metadata: ReportMetadata
    assets: StatementSection
    liabilities: StatementSection
    equity: StatementSection
    retained_earnings: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_liabilities_and_equity: Decimal
    is_balanced: bool


# =========================================================================
# Monthly trend
# =========================================================================


@dataclass(frozen=True)
class MonthlyFinancials:
    label: str
    year: int
    month: int
    revenue: Decimal
    expenses: Decimal
    cogs: Decimal
    profit: Decimal


@dataclass(frozen=True)
class MonthlyFinancialsReport:
    metadata: ReportMetadata
    months: tuple[MonthlyFinancials, ...]


# =========================================================================
# Inventory
# =========================================================================


@dataclass(frozen=True)
class StockAgingLine:
    product_id: UUID
    product_name: str
    sku: str | None
    batch_number: str | None
    quantity: Decimal
    cost_price: Decimal
    value: Decimal
    received_at: datetime
    age_days: int
    bucket: str
    expiry_date: date | None = None


@dataclass(frozen=True)
class AgingBucketTotal:
    name: str
    value: Decimal
    lot_count: int


@dataclass(frozen=True)
class StockAgingReport:
    metadata: ReportMetadata
    lines: tuple[StockAgingLine, ...]
    buckets: tuple[AgingBucketTotal, ...]
    total_value: Decimal


@dataclass(frozen=True)
class InventoryValuationLine:
    product_id: UUID
    product_name: str
    stock: Decimal
    value: Decimal


@dataclass(frozen=True)
class InventoryValuationReport:
    metadata: ReportMetadata
    cutoff: datetime
    lines: tuple[InventoryValuationLine, ...]
    total_value: Decimal


# =========================================================================
# Accounting summary
# =========================================================================


@dataclass(frozen=True)
class AccountingSummary:
    """Headline figures for a dashboard."""

    metadata: ReportMetadata
    accounts_receivable: Decimal
    accounts_payable: Decimal
    inventory_value: Decimal
    total_revenue: Decimal
    total_cogs: Decimal
    gross_profit: Decimal
    margin_percent: Decimal
