"""
Pure report transformation functions.

These functions turn selector DTOs and engine results into structured
reports.  ZERO I/O. ZERO side effects.

All monetary values are Decimal. All inputs/outputs are frozen dataclasses.

- No database access
- No clock access (timestamps arrive inside ReportMetadata)
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Sequence
from uuid import UUID

from bizledger_engines.aging import StockAgingResult
from bizledger_engines.periods import MonthWindow
from bizledger_engines.valuation import InventoryValuationResult
from bizledger_kernel.db.types import round_money, within_tolerance
from bizledger_kernel.domain.balances import natural_balance
from bizledger_kernel.domain.dtos import (
    AccountBalanceRow,
    AccountTypeTotal,
    MonthlyTypeTotal,
)
from bizledger_kernel.models.account import AccountType
from bizledger_reporting.config import AccountCodes
from bizledger_reporting.models import (
    AccountBalance,
    AccountingSummary,
    AgingBucketTotal,
    BalanceSheetReport,
    IncomeStatementReport,
    InventoryValuationLine,
    InventoryValuationReport,
    MonthlyFinancials,
    MonthlyFinancialsReport,
    ReportMetadata,
    StatementSection,
    StockAgingLine,
    StockAgingReport,
    TrialBalanceReport,
)

ZERO = Decimal("0")


# =========================================================================
# Helpers
# =========================================================================


def compute_account_balances(
    rows: Iterable[AccountBalanceRow],
) -> tuple[AccountBalance, ...]:
    """
    Attach the signed net balance to each account's totals.

    Order is preserved (selectors return rows ordered by account code).
    """
    return tuple(
        AccountBalance(
            account=row.account,
            total_debit=row.debit_total,
            total_credit=row.credit_total,
            net_balance=natural_balance(
                row.account.account_type, row.debit_total, row.credit_total,
            ),
        )
        for row in rows
    )


def _sum_net(lines: Iterable[AccountBalance]) -> Decimal:
    return sum((line.net_balance for line in lines), ZERO)


def _make_section(label: str, lines: Iterable[AccountBalance]) -> StatementSection:
    t = tuple(lines)
    return StatementSection(label=label, lines=t, total=_sum_net(t))


def _of_type(
    balances: Iterable[AccountBalance],
    account_type: AccountType,
) -> list[AccountBalance]:
    return [b for b in balances if b.account.account_type == account_type]


def _net_for_code(balances: Iterable[AccountBalance], code: str) -> Decimal:
    for b in balances:
        if b.account.code == code:
            return b.net_balance
    return ZERO


# =========================================================================
# 1. TRIAL BALANCE
# =========================================================================


def build_trial_balance(
    rows: Sequence[AccountBalanceRow],
    metadata: ReportMetadata,
    tolerance: Decimal = ZERO,
) -> TrialBalanceReport:
    """
    Build a trial balance from as-of account totals.

    is_balanced compares the debit and credit grand totals under
    ``tolerance``; an unbalanced ledger is reported, never raised.
    """
    lines = compute_account_balances(rows)
    total_debits = sum((line.total_debit for line in lines), ZERO)
    total_credits = sum((line.total_credit for line in lines), ZERO)

    return TrialBalanceReport(
        metadata=metadata,
        lines=lines,
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=within_tolerance(total_debits, total_credits, tolerance),
    )


# =========================================================================
# 2. INCOME STATEMENT
# =========================================================================


def build_income_statement(
    rows: Sequence[AccountBalanceRow],
    cogs_code: str,
    metadata: ReportMetadata,
) -> IncomeStatementReport:
    """
    Build a period income statement from period-bounded account totals.

    Expense accounts are split into cost of goods sold (the account whose
    code is ``cogs_code``) and other expenses.  Asset, liability and equity
    rows are ignored.
    """
    balances = compute_account_balances(rows)
    expenses = _of_type(balances, AccountType.EXPENSE)

    income = _make_section("Income", _of_type(balances, AccountType.INCOME))
    cogs = _make_section(
        "Cost of Goods Sold", [b for b in expenses if b.account.code == cogs_code],
    )
    other = _make_section(
        "Expenses", [b for b in expenses if b.account.code != cogs_code],
    )

    gross_profit = income.total - cogs.total

    return IncomeStatementReport(
        metadata=metadata,
        income=income,
        cogs=cogs,
        other_expenses=other,
        total_income=income.total,
        total_cogs=cogs.total,
        gross_profit=gross_profit,
        total_other_expense=other.total,
        total_expense=cogs.total + other.total,
        net_income=gross_profit - other.total,
    )


# =========================================================================
# 3. BALANCE SHEET
# =========================================================================


def compute_retained_earnings(type_totals: Iterable[AccountTypeTotal]) -> Decimal:
    """Cumulative income net minus cumulative expense net."""
    income = ZERO
    expense = ZERO
    for total in type_totals:
        net = natural_balance(
            total.account_type, total.debit_total, total.credit_total,
        )
        if total.account_type == AccountType.INCOME:
            income += net
        elif total.account_type == AccountType.EXPENSE:
            expense += net
    return income - expense


def build_balance_sheet(
    rows: Sequence[AccountBalanceRow],
    type_totals: Sequence[AccountTypeTotal],
    metadata: ReportMetadata,
    tolerance: Decimal = ZERO,
) -> BalanceSheetReport:
    """
    Build a balance sheet.

    ``rows`` carry as-of totals for asset, liability and equity accounts.
    ``type_totals`` come from an independent all-time pass over income and
    expense accounts; their difference is retained earnings, added to
    equity so that A = L + E holds for a balanced ledger.
    """
    balances = compute_account_balances(rows)

    assets = _make_section("Assets", _of_type(balances, AccountType.ASSET))
    liabilities = _make_section(
        "Liabilities", _of_type(balances, AccountType.LIABILITY),
    )
    equity = _make_section("Equity", _of_type(balances, AccountType.EQUITY))

    retained_earnings = compute_retained_earnings(type_totals)
    total_equity = equity.total + retained_earnings
    total_l_and_e = liabilities.total + total_equity

    return BalanceSheetReport(
        metadata=metadata,
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        retained_earnings=retained_earnings,
        total_assets=assets.total,
        total_liabilities=liabilities.total,
        total_equity=total_equity,
        total_liabilities_and_equity=total_l_and_e,
        is_balanced=within_tolerance(assets.total, total_l_and_e, tolerance),
    )


# =========================================================================
# 4. MONTHLY TREND
# =========================================================================


def build_monthly_financials(
    months: Sequence[MonthWindow],
    totals: Iterable[MonthlyTypeTotal],
    metadata: ReportMetadata,
) -> MonthlyFinancialsReport:
    """
    Fold per-month totals into a zero-seeded window.

    Every month in ``months`` yields exactly one entry, in the given order.
    Totals for a month outside the window are ignored.
    """
    buckets: dict[tuple[int, int], dict[str, Decimal]] = {
        m.key: {"revenue": ZERO, "expenses": ZERO, "cogs": ZERO} for m in months
    }

    for total in totals:
        bucket = buckets.get((total.year, total.month))
        if bucket is None:
            continue
        net = natural_balance(
            total.account_type, total.debit_total, total.credit_total,
        )
        if total.account_type == AccountType.INCOME:
            bucket["revenue"] += net
        elif total.account_type == AccountType.EXPENSE:
            bucket["expenses"] += net
            if total.is_cogs:
                bucket["cogs"] += net

    return MonthlyFinancialsReport(
        metadata=metadata,
        months=tuple(
            MonthlyFinancials(
                label=m.label,
                year=m.year,
                month=m.month,
                revenue=buckets[m.key]["revenue"],
                expenses=buckets[m.key]["expenses"],
                cogs=buckets[m.key]["cogs"],
                profit=buckets[m.key]["revenue"] - buckets[m.key]["expenses"],
            )
            for m in months
        ),
    )


# =========================================================================
# 5. INVENTORY
# =========================================================================


def build_stock_aging(
    result: StockAgingResult,
    metadata: ReportMetadata,
) -> StockAgingReport:
    return StockAgingReport(
        metadata=metadata,
        lines=tuple(
            StockAgingLine(
                product_id=lot.product_id,
                product_name=lot.product_name,
                sku=lot.sku,
                batch_number=lot.batch_number,
                quantity=lot.quantity,
                cost_price=lot.cost_price,
                value=lot.value,
                received_at=lot.received_at,
                age_days=lot.age_days,
                bucket=lot.bucket,
                expiry_date=lot.expiry_date,
            )
            for lot in result.lots
        ),
        buckets=tuple(
            AgingBucketTotal(name=b.name, value=b.value, lot_count=b.lot_count)
            for b in result.buckets
        ),
        total_value=result.total_value,
    )


def build_inventory_valuation(
    result: InventoryValuationResult,
    metadata: ReportMetadata,
) -> InventoryValuationReport:
    return InventoryValuationReport(
        metadata=metadata,
        cutoff=result.cutoff,
        lines=tuple(
            InventoryValuationLine(
                product_id=p.product_id,
                product_name=p.product_name,
                stock=p.quantity,
                value=p.value,
            )
            for p in result.products
        ),
        total_value=result.total_value,
    )


# =========================================================================
# 6. ACCOUNTING SUMMARY
# =========================================================================


def compute_margin_percent(gross_profit: Decimal, revenue: Decimal) -> Decimal:
    """Gross margin as a percentage, 2 places; zero when revenue <= 0."""
    if revenue <= 0:
        return ZERO
    return round_money(gross_profit / revenue * 100, 2)


def build_accounting_summary(
    rows: Sequence[AccountBalanceRow],
    codes: AccountCodes,
    metadata: ReportMetadata,
) -> AccountingSummary:
    """
    Headline figures from per-account totals over all account types.

    A configured code with no matching account contributes zero.
    """
    balances = compute_account_balances(rows)

    total_revenue = _sum_net(_of_type(balances, AccountType.INCOME))
    total_cogs = _net_for_code(_of_type(balances, AccountType.EXPENSE), codes.cogs)
    gross_profit = total_revenue - total_cogs

    return AccountingSummary(
        metadata=metadata,
        accounts_receivable=_net_for_code(balances, codes.accounts_receivable),
        accounts_payable=_net_for_code(balances, codes.accounts_payable),
        inventory_value=_net_for_code(balances, codes.inventory_asset),
        total_revenue=total_revenue,
        total_cogs=total_cogs,
        gross_profit=gross_profit,
        margin_percent=compute_margin_percent(gross_profit, total_revenue),
    )


# =========================================================================
# RENDERING
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - UUID -> str
    - date / datetime -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
