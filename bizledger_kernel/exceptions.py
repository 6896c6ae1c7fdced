"""
Typed exception hierarchy for the bizledger reporting engine.

Every error carries a class-level ``code`` (machine-readable, API-safe) and
stores its context as attributes, so callers catch by type and never parse
messages.

    BizLedgerError (base)
    |
    +-- AuthorizationError            AUTHORIZATION_DENIED
    |
    +-- QueryError                    QUERY_FAILED
    |
    +-- InvalidReportParametersError  INVALID_REPORT_PARAMETERS
    |
    +-- AccountError
    |   +-- UnknownAccountTypeError   UNKNOWN_ACCOUNT_TYPE
    |
    +-- UnreconciledLedgerError       LEDGER_UNRECONCILED
    |
    +-- ImmutabilityError
    |   +-- ImmutabilityViolationError IMMUTABILITY_VIOLATION
    |
    +-- ConfigurationError            INVALID_CONFIGURATION

Imbalance (a trial balance or balance sheet whose sides differ) is NOT an
exception.  It surfaces as ``is_balanced = False`` on the report and
callers must check the flag.  Entries the chart cannot account for do
raise (UnreconciledLedgerError): the statement would otherwise be partial.

Propagation: AuthorizationError and QueryError abort the whole statement.
The report gateway turns any ``BizLedgerError`` into a failure envelope;
no partially aggregated statement is ever returned.
"""

from decimal import Decimal


class BizLedgerError(Exception):
    """
    Base exception for all bizledger errors.

    All subclasses must define a ``code`` class attribute.
    """

    code: str = "BIZLEDGER_ERROR"


class AuthorizationError(BizLedgerError):
    """Caller may not read the given business's books."""

    code: str = "AUTHORIZATION_DENIED"

    def __init__(self, business_id: str, reason: str = "access denied"):
        self.business_id = business_id
        self.reason = reason
        super().__init__(f"Not authorized for business {business_id}: {reason}")


class QueryError(BizLedgerError):
    """A ledger or inventory store query failed."""

    code: str = "QUERY_FAILED"

    def __init__(self, query_name: str, detail: str):
        self.query_name = query_name
        self.detail = detail
        super().__init__(f"Query '{query_name}' failed: {detail}")


class InvalidReportParametersError(BizLedgerError):
    """Report parameters are inconsistent (raised before any query runs)."""

    code: str = "INVALID_REPORT_PARAMETERS"

    def __init__(self, report_type: str, reason: str):
        self.report_type = report_type
        self.reason = reason
        super().__init__(f"Invalid parameters for {report_type}: {reason}")


class AccountError(BizLedgerError):
    """Base exception for chart-of-accounts errors."""

    code: str = "ACCOUNT_ERROR"


class UnknownAccountTypeError(AccountError):
    """Stored account type is not a member of AccountType."""

    code: str = "UNKNOWN_ACCOUNT_TYPE"

    def __init__(self, account_id: str, account_type: str):
        self.account_id = account_id
        self.account_type = account_type
        super().__init__(
            f"Account {account_id} has unknown account type '{account_type}'"
        )


class UnreconciledLedgerError(BizLedgerError):
    """
    Journal totals for a business disagree with the totals of its chart.

    Raised when entries stamped with the business reference an account
    outside its chart, so a statement built from the chart would omit them.
    """

    code: str = "LEDGER_UNRECONCILED"

    def __init__(
        self,
        business_id: str,
        ledger_totals: tuple[Decimal, Decimal],
        chart_totals: tuple[Decimal, Decimal],
    ):
        self.business_id = business_id
        self.ledger_totals = ledger_totals
        self.chart_totals = chart_totals
        super().__init__(
            f"Ledger for business {business_id} does not reconcile: "
            f"journal Dr/Cr {ledger_totals[0]}/{ledger_totals[1]}, "
            f"chart Dr/Cr {chart_totals[0]}/{chart_totals[1]}"
        )


class ImmutabilityError(BizLedgerError):
    """Base exception for append-only violations."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """
    Attempted to modify or delete an append-only record.

    Journal entries and inventory ledger lines are immutable from creation;
    corrections are new entries.
    """

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )


class ConfigurationError(BizLedgerError):
    """Reporting configuration is malformed."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for '{field}': {reason}")
