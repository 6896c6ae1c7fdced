"""
Tests for append-only enforcement on journal and inventory records.

The ORM listeners are registered once per session by the db_tables fixture.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from bizledger_kernel.db.immutability import (
    ACCOUNT_STRUCTURAL_FIELDS,
    register_immutability_listeners,
)
from bizledger_kernel.exceptions import ImmutabilityViolationError
from bizledger_kernel.models.account import AccountType

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


class TestJournalEntryImmutability:

    def test_update_blocked(self, session, chart, post_entry):
        dr, _ = post_entry(chart["1001"], chart["4000"], "100", date(2024, 1, 2))

        dr.debit = Decimal("999")
        with pytest.raises(ImmutabilityViolationError) as exc_info:
            session.flush()

        assert exc_info.value.code == "IMMUTABILITY_VIOLATION"
        assert exc_info.value.entity_type == "JournalEntry"

    def test_delete_blocked(self, session, chart, post_entry):
        _, cr = post_entry(chart["1001"], chart["4000"], "100", date(2024, 1, 2))

        session.delete(cr)
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_violation_is_logged(self, session, chart, post_entry, captured_logs):
        dr, _ = post_entry(chart["1001"], chart["4000"], "5", date(2024, 1, 2))

        dr.description = "edited"
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

        blocked = [r for r in captured_logs() if r["message"] == "immutability_violation_blocked"]
        assert blocked and blocked[0]["operation"] == "UPDATE"


class TestInventoryImmutability:

    def test_ledger_line_update_blocked(self, session, create_product, record_movement, business_id):
        line = record_movement(create_product(business_id, "Widget"), "10", "5", T0)

        line.quantity_change = Decimal("11")
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_ledger_line_delete_blocked(self, session, create_product, record_movement, business_id):
        line = record_movement(create_product(business_id, "Widget"), "10", "5", T0)

        session.delete(line)
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_lot_deactivation_allowed(self, session, create_product, create_lot, business_id):
        lot = create_lot(create_product(business_id, "Widget"), "10", "5", T0)

        lot.quantity = Decimal("0")
        lot.is_active = False
        session.flush()

        assert lot.is_active is False

    def test_lot_delete_blocked(self, session, create_product, create_lot, business_id):
        lot = create_lot(create_product(business_id, "Widget"), "10", "5", T0)

        session.delete(lot)
        with pytest.raises(ImmutabilityViolationError):
            session.flush()


class TestAccountStructuralImmutability:

    def test_structural_fields(self):
        assert set(ACCOUNT_STRUCTURAL_FIELDS) == {"code", "account_type"}

    def test_rename_allowed_with_entries(self, session, chart, post_entry):
        post_entry(chart["1001"], chart["4000"], "100", date(2024, 1, 2))

        chart["4000"].name = "Product Sales"
        session.flush()

    def test_retype_blocked_with_entries(self, session, chart, post_entry):
        post_entry(chart["1001"], chart["4000"], "100", date(2024, 1, 2))

        chart["4000"].account_type = AccountType.LIABILITY.value
        with pytest.raises(ImmutabilityViolationError) as exc_info:
            session.flush()
        assert exc_info.value.entity_type == "Account"

    def test_recode_allowed_without_entries(self, session, chart):
        chart["5200"].code = "5250"
        session.flush()

        assert chart["5200"].code == "5250"

    def test_registration_is_idempotent(self, session, chart, post_entry):
        register_immutability_listeners()
        register_immutability_listeners()
        dr, _ = post_entry(chart["1001"], chart["4000"], "1", date(2024, 1, 2))

        dr.reference = "changed"
        with pytest.raises(ImmutabilityViolationError):
            session.flush()
