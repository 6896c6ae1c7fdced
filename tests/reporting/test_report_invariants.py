"""
Financial report invariant tests.

Verifies accounting invariants that must ALWAYS hold, over generated
ledgers:
- TB debits = TB credits for any set of balanced postings
- A = L + E (equity including retained earnings)
- Net income is additive over adjacent periods
- The monthly trend always has one entry per requested month
- A past inventory valuation ignores later movements

Pure layer only: postings are aggregated in-memory the way the ledger
selector aggregates them in SQL.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from hypothesis import given, settings
from hypothesis import strategies as st

from bizledger_engines.periods import trailing_months
from bizledger_engines.valuation import replay_inventory_ledger
from bizledger_kernel.domain.dtos import (
    AccountBalanceRow,
    AccountTypeTotal,
    LedgerMovement,
    MonthlyTypeTotal,
)
from bizledger_kernel.models.account import AccountType
from bizledger_reporting.models import ReportType
from bizledger_reporting.statements import (
    build_balance_sheet,
    build_income_statement,
    build_monthly_financials,
    build_trial_balance,
)
from tests.reporting.factories import make_account_info, make_metadata

CHART = (
    make_account_info("1001", "Cash on Hand", AccountType.ASSET),
    make_account_info("1200", "Inventory Asset", AccountType.ASSET),
    make_account_info("2001", "Accounts Payable", AccountType.LIABILITY),
    make_account_info("3000", "Owner Equity", AccountType.EQUITY),
    make_account_info("4000", "Sales Revenue", AccountType.INCOME),
    make_account_info("5000", "Cost of Goods Sold", AccountType.EXPENSE),
    make_account_info("5100", "Rent Expense", AccountType.EXPENSE),
)

START = date(2024, 1, 1)
END = date(2024, 12, 31)

amounts = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("1000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)

# (debit account index, credit account index, amount, day offset from START)
postings_strategy = st.lists(
    st.tuples(
        st.integers(0, len(CHART) - 1),
        st.integers(0, len(CHART) - 1),
        amounts,
        st.integers(0, (END - START).days),
    ),
    max_size=40,
)


def _rows(postings, first: date, last: date, types=tuple(AccountType)) -> list[AccountBalanceRow]:
    totals = {a.account_id: [Decimal("0"), Decimal("0")] for a in CHART}
    for dr, cr, amount, offset in postings:
        if first <= START + timedelta(days=offset) <= last:
            totals[CHART[dr].account_id][0] += amount
            totals[CHART[cr].account_id][1] += amount
    return [
        AccountBalanceRow(a, totals[a.account_id][0], totals[a.account_id][1])
        for a in CHART
        if a.account_type in types
    ]


def _type_totals(rows: list[AccountBalanceRow]) -> list[AccountTypeTotal]:
    result = []
    for account_type in (AccountType.INCOME, AccountType.EXPENSE):
        of_type = [r for r in rows if r.account.account_type == account_type]
        result.append(
            AccountTypeTotal(
                account_type,
                sum((r.debit_total for r in of_type), Decimal("0")),
                sum((r.credit_total for r in of_type), Decimal("0")),
            )
        )
    return result


class TestLedgerInvariants:

    @settings(max_examples=75, deadline=None)
    @given(postings=postings_strategy)
    def test_trial_balance_always_balances(self, postings):
        report = build_trial_balance(_rows(postings, START, END), make_metadata())

        assert report.total_debits == report.total_credits
        assert report.is_balanced is True

    @settings(max_examples=75, deadline=None)
    @given(postings=postings_strategy)
    def test_balance_sheet_identity(self, postings):
        all_rows = _rows(postings, START, END)
        bs_types = (AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY)
        report = build_balance_sheet(
            [r for r in all_rows if r.account.account_type in bs_types],
            _type_totals(all_rows),
            make_metadata(ReportType.BALANCE_SHEET),
        )

        assert report.total_assets == report.total_liabilities + report.total_equity
        assert report.is_balanced is True

    @settings(max_examples=75, deadline=None)
    @given(postings=postings_strategy, split=st.integers(0, (END - START).days - 1))
    def test_net_income_is_additive(self, postings, split):
        mid = START + timedelta(days=split)
        metadata = make_metadata(ReportType.INCOME_STATEMENT)

        def net_income(first, last):
            return build_income_statement(
                _rows(postings, first, last), "5000", metadata,
            ).net_income

        assert (
            net_income(START, mid) + net_income(mid + timedelta(days=1), END)
            == net_income(START, END)
        )


class TestTrendInvariants:

    @settings(max_examples=50, deadline=None)
    @given(
        today=st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 12, 31)),
        count=st.integers(1, 24),
    )
    def test_one_entry_per_month_in_order(self, today, count):
        months = trailing_months(today, count)
        report = build_monthly_financials(
            months, [], make_metadata(ReportType.MONTHLY_FINANCIALS),
        )

        keys = [(m.year, m.month) for m in report.months]
        assert len(keys) == count
        assert keys == sorted(keys)
        assert keys[-1] == (today.year, today.month)
        assert all(m.revenue == m.expenses == m.cogs == m.profit == 0 for m in report.months)

    @settings(max_examples=50, deadline=None)
    @given(revenue=amounts, cost=amounts, month_index=st.integers(0, 5))
    def test_profit_is_revenue_less_expenses(self, revenue, cost, month_index):
        months = trailing_months(date(2024, 6, 15), 6)
        target = months[month_index]
        totals = [
            MonthlyTypeTotal(target.year, target.month, AccountType.INCOME, False, Decimal("0"), revenue),
            MonthlyTypeTotal(target.year, target.month, AccountType.EXPENSE, True, cost, Decimal("0")),
        ]
        report = build_monthly_financials(
            months, totals, make_metadata(ReportType.MONTHLY_FINANCIALS),
        )

        entry = report.months[month_index]
        assert entry.profit == revenue - cost
        assert entry.cogs == entry.expenses == cost


class TestValuationInvariants:

    @settings(max_examples=75, deadline=None)
    @given(
        changes=st.lists(
            st.tuples(
                st.integers(0, 2),
                st.decimals(min_value=-50, max_value=50, places=0),
                st.one_of(st.none(), amounts),
                st.integers(0, 60),
            ),
            max_size=30,
        ),
        cutoff_day=st.integers(0, 60),
    )
    def test_future_movements_never_affect_past_valuation(self, changes, cutoff_day):
        t0 = datetime(2024, 3, 1, tzinfo=UTC)
        products = [(uuid4(), name) for name in ("Alpha", "Beta", "Gamma")]
        movements = [
            LedgerMovement(
                product_id=products[p][0],
                product_name=products[p][1],
                quantity_change=qty,
                unit_cost=cost,
                created_at=t0 + timedelta(days=day),
            )
            for p, qty, cost, day in changes
        ]
        cutoff = t0 + timedelta(days=cutoff_day)

        full = replay_inventory_ledger(movements=movements, cutoff=cutoff)
        truncated = replay_inventory_ledger(
            movements=[m for m in movements if m.created_at <= cutoff],
            cutoff=cutoff,
        )

        assert full == truncated
        assert all(p.quantity != 0 for p in full.products)
