"""
Reporting Service (``bizledger_reporting.service``).

Responsibility
--------------
Orchestrates report generation -- trial balance, income statement, balance
sheet, monthly trend, stock aging, inventory valuation and the accounting
summary -- by bridging the kernel selectors (``LedgerSelector``,
``InventorySelector``) and the pure engines to the transformation
functions in ``statements.py``.  This is a **read-only** service.

Architecture position
---------------------
**Modules layer**.  Constructor: ``session`` + ``clock`` + ``config``.
The caller owns the session; ``ReportGateway`` is the usual caller.

Invariants enforced
-------------------
* Read-only -- no mutations to the journal or inventory stores.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.
* Parameter validation happens before any query runs.

Failure modes
-------------
* Selector query failure  -> ``QueryError`` propagates; no partial report.
* Inconsistent parameters (period_end < period_start, month_count < 1)
  -> ``InvalidReportParametersError`` before query execution.
* Unknown stored account type  -> ``UnknownAccountTypeError``.
* Journal entries outside the chart  -> ``UnreconciledLedgerError`` from
  the trial balance.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy.orm import Session

from bizledger_engines.aging import age_lots
from bizledger_engines.periods import trailing_months, window_bounds
from bizledger_engines.valuation import replay_inventory_ledger, valuation_cutoff
from bizledger_kernel.domain.clock import Clock, SystemClock
from bizledger_kernel.exceptions import (
    InvalidReportParametersError,
    UnreconciledLedgerError,
)
from bizledger_kernel.logging_config import get_logger
from bizledger_kernel.models.account import AccountType
from bizledger_kernel.selectors.inventory_selector import InventorySelector
from bizledger_kernel.selectors.ledger_selector import LedgerSelector
from bizledger_reporting.config import ReportingConfig
from bizledger_reporting.models import (
    AccountingSummary,
    BalanceSheetReport,
    IncomeStatementReport,
    InventoryValuationReport,
    MonthlyFinancialsReport,
    ReportMetadata,
    ReportType,
    StockAgingReport,
    TrialBalanceReport,
)
from bizledger_reporting.statements import (
    build_accounting_summary,
    build_balance_sheet,
    build_income_statement,
    build_inventory_valuation,
    build_monthly_financials,
    build_stock_aging,
    build_trial_balance,
)

logger = get_logger("reporting.service")

ALL_ACCOUNT_TYPES = tuple(AccountType)
BALANCE_SHEET_TYPES = (AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY)
INCOME_STATEMENT_TYPES = (AccountType.INCOME, AccountType.EXPENSE)


def _check_period(report_type: ReportType, start: date, end: date) -> None:
    if end < start:
        raise InvalidReportParametersError(
            report_type.value,
            f"period_end {end.isoformat()} is before period_start {start.isoformat()}",
        )


class ReportingService:
    """
    Report generation service.

    Contract
    --------
    * Every public method returns a typed report DTO.
    * All methods are **read-only**.

    Guarantees
    ----------
    * No financial logic lives in this class: it loads, then delegates to
      pure functions and engines.
    * Clock is injectable; "today", "now" and the current month all come
      from it.

    Non-goals
    ---------
    * Does NOT check authorization (``ReportGateway`` does).
    * Does NOT cache.  Two calls may observe different ledger states.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._ledger = LedgerSelector(session)
        self._inventory = InventorySelector(session)

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _build_metadata(
        self,
        report_type: ReportType,
        business_id: UUID,
        as_of_date: date | None = None,
        period_start: date | None = None,
        period_end: date | None = None,
    ) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_type=report_type,
            business_id=business_id,
            entity_name=self._config.entity_name,
            currency=self._config.currency,
            generated_at=self._clock.now().isoformat(),
            as_of_date=as_of_date,
            period_start=period_start,
            period_end=period_end,
        )

    # =========================================================================
    # Ledger reports
    # =========================================================================

    def trial_balance(self, business_id: UUID, as_of_date: date) -> TrialBalanceReport:
        """
        Generate a trial balance as of a date (inclusive).

        Every account of the business appears, including those without
        activity.  The chart totals are reconciled against the business's
        journal grand totals before the report is returned.

        Raises:
            UnreconciledLedgerError: journal entries of the business post to
                accounts outside its chart.
        """
        rows = self._ledger.account_balances(business_id, ALL_ACCOUNT_TYPES, as_of_date)
        metadata = self._build_metadata(
            ReportType.TRIAL_BALANCE, business_id, as_of_date=as_of_date,
        )
        report = build_trial_balance(rows, metadata, self._config.balance_tolerance)

        ledger_totals = self._ledger.total_debits_credits(business_id, as_of_date)
        chart_totals = (report.total_debits, report.total_credits)
        if ledger_totals != chart_totals:
            logger.error(
                "trial_balance_unreconciled",
                extra={
                    "as_of_date": as_of_date.isoformat(),
                    "ledger_debits": str(ledger_totals[0]),
                    "ledger_credits": str(ledger_totals[1]),
                    "chart_debits": str(chart_totals[0]),
                    "chart_credits": str(chart_totals[1]),
                },
            )
            raise UnreconciledLedgerError(str(business_id), ledger_totals, chart_totals)

        logger.info(
            "trial_balance_generated",
            extra={
                "as_of_date": as_of_date.isoformat(),
                "line_count": len(report.lines),
                "total_debits": str(report.total_debits),
                "total_credits": str(report.total_credits),
                "is_balanced": report.is_balanced,
            },
        )
        if not report.is_balanced:
            logger.warning(
                "trial_balance_out_of_balance",
                extra={"difference": str(report.total_debits - report.total_credits)},
            )
        return report

    def income_statement(
        self,
        business_id: UUID,
        period_start: date,
        period_end: date,
    ) -> IncomeStatementReport:
        """
        Generate an income statement for period_start..period_end inclusive.

        Raises:
            InvalidReportParametersError: period_end < period_start.
        """
        _check_period(ReportType.INCOME_STATEMENT, period_start, period_end)

        codes = self._config.codes_for(business_id)
        rows = self._ledger.period_balances(
            business_id, INCOME_STATEMENT_TYPES, period_start, period_end,
        )
        metadata = self._build_metadata(
            ReportType.INCOME_STATEMENT,
            business_id,
            period_start=period_start,
            period_end=period_end,
        )
        report = build_income_statement(rows, codes.cogs, metadata)

        logger.info(
            "income_statement_generated",
            extra={
                "period_start": period_start.isoformat(),
                "period_end": period_end.isoformat(),
                "total_income": str(report.total_income),
                "gross_profit": str(report.gross_profit),
                "net_income": str(report.net_income),
            },
        )
        return report

    def balance_sheet(self, business_id: UUID, as_of_date: date) -> BalanceSheetReport:
        """
        Generate a balance sheet as of a date.

        Two independent aggregation passes: per-account totals for the
        balance sheet types, and per-type totals for retained earnings.
        """
        rows = self._ledger.account_balances(
            business_id, BALANCE_SHEET_TYPES, as_of_date,
        )
        type_totals = self._ledger.cumulative_type_totals(
            business_id, INCOME_STATEMENT_TYPES, as_of_date,
        )
        metadata = self._build_metadata(
            ReportType.BALANCE_SHEET, business_id, as_of_date=as_of_date,
        )
        report = build_balance_sheet(
            rows, type_totals, metadata, self._config.balance_tolerance,
        )

        logger.info(
            "balance_sheet_generated",
            extra={
                "as_of_date": as_of_date.isoformat(),
                "total_assets": str(report.total_assets),
                "total_l_and_e": str(report.total_liabilities_and_equity),
                "retained_earnings": str(report.retained_earnings),
                "is_balanced": report.is_balanced,
            },
        )
        if not report.is_balanced:
            logger.warning(
                "balance_sheet_out_of_balance",
                extra={
                    "difference": str(
                        report.total_assets - report.total_liabilities_and_equity
                    ),
                },
            )
        return report

    def monthly_financials(
        self,
        business_id: UUID,
        month_count: int | None = None,
    ) -> MonthlyFinancialsReport:
        """
        Revenue, expenses, COGS and profit for each of the trailing
        ``month_count`` calendar months, ending with the current month.

        Raises:
            InvalidReportParametersError: month_count < 1.
        """
        if month_count is None:
            month_count = self._config.default_trend_months
        if month_count < 1:
            raise InvalidReportParametersError(
                ReportType.MONTHLY_FINANCIALS.value,
                f"month_count must be at least 1, got {month_count}",
            )

        months = trailing_months(self._clock.today(), month_count)
        start, end = window_bounds(months)
        codes = self._config.codes_for(business_id)

        totals = self._ledger.monthly_type_totals(business_id, start, end, codes.cogs)
        metadata = self._build_metadata(
            ReportType.MONTHLY_FINANCIALS,
            business_id,
            period_start=start,
            period_end=end,
        )
        report = build_monthly_financials(months, totals, metadata)

        logger.info(
            "monthly_financials_generated",
            extra={
                "month_count": month_count,
                "window_start": start.isoformat(),
                "window_end": end.isoformat(),
                "row_count": len(totals),
            },
        )
        return report

    def accounting_summary(
        self,
        business_id: UUID,
        period_start: date | None = None,
        period_end: date | None = None,
    ) -> AccountingSummary:
        """
        Receivables, payables, inventory, revenue, COGS and gross margin.

        Without a range, balances are all-time up to today.  With a range
        (both bounds required), they cover that period only.

        Raises:
            InvalidReportParametersError: only one bound given, or
                period_end < period_start.
        """
        if (period_start is None) != (period_end is None):
            raise InvalidReportParametersError(
                ReportType.ACCOUNTING_SUMMARY.value,
                "period_start and period_end must be given together",
            )

        codes = self._config.codes_for(business_id)
        if period_start is None:
            as_of = self._clock.today()
            rows = self._ledger.account_balances(business_id, ALL_ACCOUNT_TYPES, as_of)
            metadata = self._build_metadata(
                ReportType.ACCOUNTING_SUMMARY, business_id, as_of_date=as_of,
            )
        else:
            _check_period(ReportType.ACCOUNTING_SUMMARY, period_start, period_end)
            rows = self._ledger.period_balances(
                business_id, ALL_ACCOUNT_TYPES, period_start, period_end,
            )
            metadata = self._build_metadata(
                ReportType.ACCOUNTING_SUMMARY,
                business_id,
                period_start=period_start,
                period_end=period_end,
            )

        summary = build_accounting_summary(rows, codes, metadata)

        logger.info(
            "accounting_summary_generated",
            extra={
                "period_start": period_start.isoformat() if period_start else None,
                "period_end": period_end.isoformat() if period_end else None,
                "total_revenue": str(summary.total_revenue),
                "gross_profit": str(summary.gross_profit),
            },
        )
        return summary

    # =========================================================================
    # Inventory reports
    # =========================================================================

    def stock_aging(self, business_id: UUID) -> StockAgingReport:
        """Age active lots against the clock's current instant."""
        now = self._clock.now()
        lots = self._inventory.active_lots(business_id)
        result = age_lots(lots=lots, as_of=now)
        metadata = self._build_metadata(
            ReportType.STOCK_AGING, business_id, as_of_date=now.date(),
        )
        report = build_stock_aging(result, metadata)

        logger.info(
            "stock_aging_generated",
            extra={
                "lot_count": len(report.lines),
                "total_value": str(report.total_value),
            },
        )
        return report

    def inventory_valuation(
        self,
        business_id: UUID,
        as_of: date | datetime | None = None,
    ) -> InventoryValuationReport:
        """
        Reconstruct stock and value per product at a past instant.

        A ``date`` means the end of that day; ``None`` means now.
        """
        cutoff = valuation_cutoff(as_of if as_of is not None else self._clock.now())
        movements = self._inventory.ledger_movements(business_id, cutoff)
        result = replay_inventory_ledger(movements=movements, cutoff=cutoff)
        metadata = self._build_metadata(
            ReportType.INVENTORY_VALUATION, business_id, as_of_date=cutoff.date(),
        )
        report = build_inventory_valuation(result, metadata)

        logger.info(
            "inventory_valuation_generated",
            extra={
                "cutoff": cutoff.isoformat(),
                "movement_count": len(movements),
                "product_count": len(report.lines),
                "total_value": str(report.total_value),
            },
        )
        return report
