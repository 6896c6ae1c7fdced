"""
Report Gateway (``bizledger_reporting.gateway``).

Responsibility
--------------
The request boundary for report generation.  For each call it:

1. binds request-scoped log context (request_id, business_id, report_type,
   actor_id),
2. asks the authorization collaborator whether the caller may read the
   business's books -- before any session is opened,
3. opens exactly one read-only session (``read_scope``), runs the report
   through ``ReportingService`` and releases the session on every path,
4. wraps the outcome in a ``ReportResult`` success/failure envelope.

Failure modes
-------------
* Every ``BizLedgerError`` (authorization, query, parameters, unknown
  account type) becomes a failure envelope carrying the error's ``code``.
* A stray ``SQLAlchemyError`` becomes a ``QUERY_FAILED`` envelope.
* Anything else is a programming error and propagates.
* A failure never carries a partially built report.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from bizledger_kernel.db.engine import read_scope
from bizledger_kernel.domain.clock import Clock
from bizledger_kernel.exceptions import AuthorizationError, BizLedgerError, QueryError
from bizledger_kernel.logging_config import LogContext, get_logger
from bizledger_reporting.config import ReportingConfig
from bizledger_reporting.models import ReportType
from bizledger_reporting.service import ReportingService
from bizledger_reporting.statements import render_to_dict

logger = get_logger("reporting.gateway")


class BusinessAccessVerifier(Protocol):
    """
    Authorization collaborator.

    ``verify`` raises AuthorizationError (or returns False) when the current
    caller may not read the business's books.
    """

    def verify(self, business_id: UUID) -> bool | None: ...


@dataclass(frozen=True)
class ReportResult:
    """Outcome of one gateway call."""

    report_type: ReportType
    report: Any = None
    error: str | None = None
    error_code: str | None = None

    @property
    def success(self) -> bool:
        return self.error_code is None

    @classmethod
    def ok(cls, report_type: ReportType, report: Any) -> ReportResult:
        return cls(report_type=report_type, report=report)

    @classmethod
    def failure(cls, report_type: ReportType, exc: BizLedgerError) -> ReportResult:
        return cls(report_type=report_type, error=str(exc), error_code=exc.code)

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-ready envelope.

        ``{"success": True, "<report_type>": {...}}`` or
        ``{"success": False, "error": "...", "error_code": "..."}``.
        """
        if self.success:
            return {"success": True, self.report_type.value: render_to_dict(self.report)}
        return {"success": False, "error": self.error, "error_code": self.error_code}


class ReportGateway:
    """
    Authorized, session-scoped entry point for every report.

    Contract
    --------
    * Each public method returns a ``ReportResult`` and never raises a
      ``BizLedgerError``.
    * One session per call; nothing is shared between calls.

    Non-goals
    ---------
    * Authentication.  The verifier is assumed to know who the caller is.
    """

    def __init__(
        self,
        verifier: BusinessAccessVerifier,
        session_factory: sessionmaker[Session] | None = None,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._verifier = verifier
        self._session_factory = session_factory
        self._clock = clock
        self._config = config or ReportingConfig.with_defaults()

    def _run(
        self,
        report_type: ReportType,
        business_id: UUID,
        actor_id: UUID | str | None,
        build: Callable[[ReportingService], Any],
    ) -> ReportResult:
        with LogContext.bind(
            request_id=str(uuid4()),
            business_id=str(business_id),
            report_type=report_type.value,
            actor_id=actor_id,
        ):
            logger.info("report_requested")
            t0 = time.monotonic()
            try:
                if self._verifier.verify(business_id) is False:
                    raise AuthorizationError(str(business_id))
                with read_scope(self._session_factory) as session:
                    service = ReportingService(session, self._clock, self._config)
                    report = build(service)
            except BizLedgerError as exc:
                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                logger.warning(
                    "report_failed",
                    extra={"error_code": exc.code, "duration_ms": duration_ms},
                    exc_info=True,
                )
                return ReportResult.failure(report_type, exc)
            except SQLAlchemyError as exc:
                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                logger.error(
                    "report_failed",
                    extra={"error_code": QueryError.code, "duration_ms": duration_ms},
                    exc_info=True,
                )
                return ReportResult.failure(
                    report_type, QueryError(report_type.value, str(exc)),
                )

            duration_ms = round((time.monotonic() - t0) * 1000, 2)
            logger.info("report_completed", extra={"duration_ms": duration_ms})
            return ReportResult.ok(report_type, report)

    # =========================================================================
    # Public API
    # =========================================================================

    def trial_balance(
        self, business_id: UUID, as_of_date: date, *, actor_id: UUID | None = None,
    ) -> ReportResult:
        return self._run(
            ReportType.TRIAL_BALANCE, business_id, actor_id,
            lambda svc: svc.trial_balance(business_id, as_of_date),
        )

    def income_statement(
        self,
        business_id: UUID,
        period_start: date,
        period_end: date,
        *,
        actor_id: UUID | None = None,
    ) -> ReportResult:
        return self._run(
            ReportType.INCOME_STATEMENT, business_id, actor_id,
            lambda svc: svc.income_statement(business_id, period_start, period_end),
        )

    def balance_sheet(
        self, business_id: UUID, as_of_date: date, *, actor_id: UUID | None = None,
    ) -> ReportResult:
        return self._run(
            ReportType.BALANCE_SHEET, business_id, actor_id,
            lambda svc: svc.balance_sheet(business_id, as_of_date),
        )

    def monthly_financials(
        self,
        business_id: UUID,
        month_count: int | None = None,
        *,
        actor_id: UUID | None = None,
    ) -> ReportResult:
        return self._run(
            ReportType.MONTHLY_FINANCIALS, business_id, actor_id,
            lambda svc: svc.monthly_financials(business_id, month_count),
        )

    def stock_aging(
        self, business_id: UUID, *, actor_id: UUID | None = None,
    ) -> ReportResult:
        return self._run(
            ReportType.STOCK_AGING, business_id, actor_id,
            lambda svc: svc.stock_aging(business_id),
        )

    def inventory_valuation(
        self,
        business_id: UUID,
        as_of: date | datetime | None = None,
        *,
        actor_id: UUID | None = None,
    ) -> ReportResult:
        return self._run(
            ReportType.INVENTORY_VALUATION, business_id, actor_id,
            lambda svc: svc.inventory_valuation(business_id, as_of),
        )

    def accounting_summary(
        self,
        business_id: UUID,
        period_start: date | None = None,
        period_end: date | None = None,
        *,
        actor_id: UUID | None = None,
    ) -> ReportResult:
        return self._run(
            ReportType.ACCOUNTING_SUMMARY, business_id, actor_id,
            lambda svc: svc.accounting_summary(business_id, period_start, period_end),
        )
