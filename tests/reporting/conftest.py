"""
Reporting-specific test fixtures.

Provides:
- ReportingService instances wired to the test session and clock
- A posted cash sale with its cost of goods sold
- Ledgers the chart cannot fully account for
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from bizledger_kernel.models.account import Account
from bizledger_kernel.models.journal import JournalEntry
from bizledger_reporting.config import ReportingConfig
from bizledger_reporting.service import ReportingService


@pytest.fixture
def reporting_config() -> ReportingConfig:
    """Standard reporting configuration for tests."""
    return ReportingConfig.with_defaults()


@pytest.fixture
def reporting_service(
    session,
    deterministic_clock,
    reporting_config,
) -> ReportingService:
    """ReportingService wired to the test session."""
    return ReportingService(
        session=session,
        clock=deterministic_clock,
        config=reporting_config,
    )


@pytest.fixture
def cash_sale_with_cogs(chart, post_entry):
    """A 1000 cash sale and its 600 cost relieved from inventory."""
    post_entry(chart["1001"], chart["4000"], "1000", date(2024, 5, 10))
    post_entry(chart["5000"], chart["1200"], "600", date(2024, 5, 10))
    return chart


@pytest.fixture
def legacy_revenue_sale(session, chart, post_entry, business_id):
    """A 1000 cash sale credited to an account stored with type 'revenue'."""
    legacy = Account(
        business_id=business_id, code="4900", name="Legacy Sales", account_type="revenue",
    )
    session.add(legacy)
    session.flush()
    post_entry(chart["1001"], legacy, "1000", date(2024, 5, 10))
    return legacy


@pytest.fixture
def entry_outside_chart(session, chart, create_chart, business_id):
    """A balanced sale whose credit leg points at another business's account."""
    other = create_chart(uuid4())
    session.add_all([
        JournalEntry(
            business_id=business_id,
            account_id=chart["1001"].id,
            transaction_date=date(2024, 5, 10),
            debit=Decimal("1000"),
            credit=Decimal("0"),
            reference="TX-STRAY",
        ),
        JournalEntry(
            business_id=business_id,
            account_id=other["4000"].id,
            transaction_date=date(2024, 5, 10),
            debit=Decimal("0"),
            credit=Decimal("1000"),
            reference="TX-STRAY",
        ),
    ])
    session.flush()
    return chart
