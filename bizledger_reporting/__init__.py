"""
Reporting Module (``bizledger_reporting``).

Responsibility
--------------
Read-only module that generates reports from a business's ledger and
inventory stores: trial balance, income statement, balance sheet, monthly
trend, stock aging, point-in-time inventory valuation and the accounting
summary.

Architecture position
---------------------
**Modules layer**.  ``ReportGateway`` is the request boundary;
``ReportingService`` orchestrates selectors and engines; all statement
arithmetic lives in pure functions in ``statements.py``.

Invariants enforced
-------------------
* Nothing is written by this module.
* Every figure derives from the append-only journal and inventory ledger;
  no balance is stored or cached.
"""

from bizledger_reporting.config import (
    AccountCodes,
    ReportingConfig,
    load_reporting_config,
)
from bizledger_reporting.gateway import (
    BusinessAccessVerifier,
    ReportGateway,
    ReportResult,
)
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
    ReportType,
    StatementSection,
    StockAgingLine,
    StockAgingReport,
    TrialBalanceReport,
)
from bizledger_reporting.service import ReportingService

__all__ = [
    # Entry points
    "ReportGateway",
    "ReportResult",
    "BusinessAccessVerifier",
    "ReportingService",
    # Config
    "AccountCodes",
    "ReportingConfig",
    "load_reporting_config",
    # Models
    "ReportType",
    "ReportMetadata",
    "AccountBalance",
    "StatementSection",
    "TrialBalanceReport",
    "IncomeStatementReport",
    "BalanceSheetReport",
    "MonthlyFinancials",
    "MonthlyFinancialsReport",
    "StockAgingLine",
    "AgingBucketTotal",
    "StockAgingReport",
    "InventoryValuationLine",
    "InventoryValuationReport",
    "AccountingSummary",
]
