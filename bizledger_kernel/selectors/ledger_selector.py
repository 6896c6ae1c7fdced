"""
Module: bizledger_kernel.selectors.ledger_selector
Responsibility: Read-only ledger queries: chart of accounts, per-account
    debit/credit totals (as-of and period-bounded), per-type cumulative
    totals and per-month totals.  The ledger is a derived view over
    JournalEntry rows; there are no stored balances anywhere.
Architecture position: Kernel > Selectors.  May import from models/,
    domain/ and selectors/base.py.

Invariants enforced:
    - Business scoping: every query filters on business_id.
    - As-of cutoffs are inclusive: an entry dated exactly ``as_of_date`` is
      counted, an entry dated the day after is not.
    - Accounts with no qualifying entries still appear with zero totals.  The
      date predicate lives in the LEFT OUTER JOIN's ON clause so it never
      drops the account row itself.
    - Stored account types are validated on read (UnknownAccountTypeError).
      Type filtering happens after parsing, never in SQL, so an account
      with an unknown type aborts the query instead of silently dropping
      out of a statement.

Failure modes:
    - QueryError on any driver failure.
    - UnknownAccountTypeError on any account of the business, whatever
      types were requested.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy import and_, func, select

from bizledger_kernel.db.types import to_decimal
from bizledger_kernel.domain.balances import parse_account_type
from bizledger_kernel.domain.dtos import (
    AccountBalanceRow,
    AccountInfo,
    AccountTypeTotal,
    MonthlyTypeTotal,
)
from bizledger_kernel.models.account import Account, AccountType
from bizledger_kernel.models.journal import JournalEntry
from bizledger_kernel.selectors.base import BaseSelector


class LedgerSelector(BaseSelector):
    """
    Selector for ledger queries -- the authoritative balance computation path.

    Contract:
        All balances are SUM(debit) / SUM(credit) over JournalEntry rows at
        query time.  Results are ordered by account code.

    Guarantees:
        - All amounts are Decimal (never float); an account without entries
          reports Decimal("0") on both sides.
        - Every account row of the business is type-checked before the
          requested types are kept.

    Non-goals:
        - No sign handling.  Natural balances are applied downstream by the
          statement builders using the normal-balance rules.
    """

    # -----------------------------------------------------------------
    # Chart of accounts
    # -----------------------------------------------------------------

    def accounts(
        self,
        business_id: UUID,
        account_types: Iterable[AccountType] | None = None,
    ) -> tuple[AccountInfo, ...]:
        """Return the business's accounts, optionally filtered by type."""
        stmt = (
            select(Account.id, Account.code, Account.name, Account.account_type)
            .where(Account.business_id == business_id)
            .order_by(Account.code)
        )

        rows = self._execute("accounts", stmt)
        infos = [
            AccountInfo(
                account_id=row.id,
                code=row.code,
                name=row.name,
                account_type=parse_account_type(row.id, row.account_type),
            )
            for row in rows
        ]
        if account_types is not None:
            wanted = set(map(AccountType, account_types))
            infos = [info for info in infos if info.account_type in wanted]
        return tuple(infos)

    # -----------------------------------------------------------------
    # Per-account totals
    # -----------------------------------------------------------------

    def _balances(
        self,
        query_name: str,
        business_id: UUID,
        account_types: Iterable[AccountType],
        entry_conditions: list,
    ) -> list[AccountBalanceRow]:
        wanted = set(map(AccountType, account_types))
        join_on = and_(
            JournalEntry.account_id == Account.id,
            JournalEntry.business_id == business_id,
            *entry_conditions,
        )
        stmt = (
            select(
                Account.id,
                Account.code,
                Account.name,
                Account.account_type,
                func.coalesce(func.sum(JournalEntry.debit), Decimal("0")).label(
                    "debit_total"
                ),
                func.coalesce(func.sum(JournalEntry.credit), Decimal("0")).label(
                    "credit_total"
                ),
            )
            .select_from(Account)
            .outerjoin(JournalEntry, join_on)
            .where(Account.business_id == business_id)
            .group_by(Account.id, Account.code, Account.name, Account.account_type)
            .order_by(Account.code)
        )

        rows = self._execute(query_name, stmt)
        result = []
        for row in rows:
            account_type = parse_account_type(row.id, row.account_type)
            if account_type not in wanted:
                continue
            result.append(
                AccountBalanceRow(
                    account=AccountInfo(
                        account_id=row.id,
                        code=row.code,
                        name=row.name,
                        account_type=account_type,
                    ),
                    debit_total=to_decimal(row.debit_total),
                    credit_total=to_decimal(row.credit_total),
                )
            )
        return result
    def account_balances(
        self,
        business_id: UUID,
        account_types: Iterable[AccountType],
        as_of_date: date,
    ) -> list[AccountBalanceRow]:
        """
        Debit/credit totals per account for entries dated <= as_of_date.

        Postconditions: one row per account of the requested types, including
            accounts with no activity (zeros), ordered by code.
        """
        return self._balances(
            "account_balances",
            business_id,
            account_types,
            [JournalEntry.transaction_date <= as_of_date],
        )

    def period_balances(
        self,
        business_id: UUID,
        account_types: Iterable[AccountType],
        start: date,
        end: date,
    ) -> list[AccountBalanceRow]:
        """Debit/credit totals per account for start <= transaction_date <= end."""
        return self._balances(
            "period_balances",
            business_id,
            account_types,
            [
                JournalEntry.transaction_date >= start,
                JournalEntry.transaction_date <= end,
            ],
        )

    # -----------------------------------------------------------------
    # Aggregates by type
    # -----------------------------------------------------------------

    def cumulative_type_totals(
        self,
        business_id: UUID,
        account_types: Iterable[AccountType],
        as_of_date: date,
    ) -> tuple[AccountTypeTotal, ...]:
        """
        Debit/credit totals per account type, all time up to as_of_date.

        Independent of ``account_balances``: the balance sheet uses this pass
        over income and expense accounts to derive retained earnings.
        Types with no entries are returned with zero totals.
        """
        types = [AccountType(t) for t in account_types]
        stmt = (
            select(
                Account.id,
                Account.account_type,
                func.sum(JournalEntry.debit).label("debit_total"),
                func.sum(JournalEntry.credit).label("credit_total"),
            )
            .select_from(JournalEntry)
            .join(Account, JournalEntry.account_id == Account.id)
            .where(
                JournalEntry.business_id == business_id,
                Account.business_id == business_id,
                JournalEntry.transaction_date <= as_of_date,
            )
            .group_by(Account.id, Account.account_type)
        )

        rows = self._execute("cumulative_type_totals", stmt)
        folded = {t: [Decimal("0"), Decimal("0")] for t in types}
        for row in rows:
            account_type = parse_account_type(row.id, row.account_type)
            if account_type in folded:
                folded[account_type][0] += to_decimal(row.debit_total)
                folded[account_type][1] += to_decimal(row.credit_total)

        return tuple(
            AccountTypeTotal(
                account_type=account_type,
                debit_total=folded[account_type][0],
                credit_total=folded[account_type][1],
            )
            for account_type in types
        )

    def monthly_type_totals(
        self,
        business_id: UUID,
        start: date,
        end: date,
        cogs_code: str,
    ) -> list[MonthlyTypeTotal]:
        """
        Income and expense totals grouped by calendar month.

        Rows are grouped by (year, month, account, type) in SQL and folded
        to (year, month, type, is-COGS) here, so no dialect-specific boolean
        expression is needed.  Balance-sheet accounts are parsed, then
        dropped.
        """
        year = func.extract("year", JournalEntry.transaction_date).label("year")
        month = func.extract("month", JournalEntry.transaction_date).label("month")
        stmt = (
            select(
                year,
                month,
                Account.id,
                Account.account_type,
                Account.code,
                func.sum(JournalEntry.debit).label("debit_total"),
                func.sum(JournalEntry.credit).label("credit_total"),
            )
            .select_from(JournalEntry)
            .join(Account, JournalEntry.account_id == Account.id)
            .where(
                JournalEntry.business_id == business_id,
                Account.business_id == business_id,
                JournalEntry.transaction_date >= start,
                JournalEntry.transaction_date <= end,
            )
            .group_by(year, month, Account.id, Account.account_type, Account.code)
        )

        rows = self._execute("monthly_type_totals", stmt)

        folded: dict[tuple[int, int, AccountType, bool], list[Decimal]] = {}
        for row in rows:
            account_type = parse_account_type(row.id, row.account_type)
            if account_type not in (AccountType.INCOME, AccountType.EXPENSE):
                continue
            key = (
                int(row.year),
                int(row.month),
                account_type,
                account_type == AccountType.EXPENSE and row.code == cogs_code,
            )
            totals = folded.setdefault(key, [Decimal("0"), Decimal("0")])
            totals[0] += to_decimal(row.debit_total)
            totals[1] += to_decimal(row.credit_total)

        return [
            MonthlyTypeTotal(
                year=y,
                month=m,
                account_type=t,
                is_cogs=is_cogs,
                debit_total=dr,
                credit_total=cr,
            )
            for (y, m, t, is_cogs), (dr, cr) in sorted(
                folded.items(), key=lambda kv: (kv[0][0], kv[0][1], kv[0][2].value)
            )
        ]

    def total_debits_credits(
        self,
        business_id: UUID,
        as_of_date: date | None = None,
    ) -> tuple[Decimal, Decimal]:
        """Grand totals of debits and credits for a business."""
        stmt = select(
            func.sum(JournalEntry.debit).label("debit_total"),
            func.sum(JournalEntry.credit).label("credit_total"),
        ).where(JournalEntry.business_id == business_id)
        if as_of_date is not None:
            stmt = stmt.where(JournalEntry.transaction_date <= as_of_date)

        rows = self._execute("total_debits_credits", stmt)
        row = rows[0]
        return to_decimal(row.debit_total), to_decimal(row.credit_total)
