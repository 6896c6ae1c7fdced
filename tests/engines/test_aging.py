"""
Tests for the stock aging engine.

Covers:
- Age calculation
- Bucket boundaries
- Per-bucket totals and ordering
- Custom buckets and error handling
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from bizledger_engines.aging import (
    STOCK_AGING_BUCKETS,
    AgeBucket,
    age_lots,
    calculate_age_days,
    classify,
)
from bizledger_kernel.domain.dtos import LotSnapshot

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


def _lot(days_old: int, quantity: str, cost: str, name: str = "Widget") -> LotSnapshot:
    return LotSnapshot(
        lot_id=uuid4(),
        product_id=uuid4(),
        product_name=name,
        sku=None,
        batch_number=None,
        quantity=Decimal(quantity),
        cost_price=Decimal(cost),
        created_at=NOW - timedelta(days=days_old),
    )


class TestAgeCalculation:
    """Tests for age calculation."""

    def test_whole_days(self):
        assert calculate_age_days(NOW - timedelta(days=45), NOW) == 45

    def test_partial_day_truncates(self):
        assert calculate_age_days(NOW - timedelta(days=2, hours=23), NOW) == 2

    def test_future_receipt_ages_as_zero(self):
        assert calculate_age_days(NOW + timedelta(hours=5), NOW) == 0


class TestBucketClassification:
    """Tests for the fixed stock aging buckets."""

    @pytest.mark.parametrize(
        ("age", "expected"),
        [
            (0, "0-30"),
            (30, "0-30"),
            (31, "31-60"),
            (60, "31-60"),
            (61, "61-90"),
            (90, "61-90"),
            (91, "90+"),
            (400, "90+"),
        ],
    )
    def test_boundaries(self, age, expected):
        assert classify(age, STOCK_AGING_BUCKETS).name == expected

    def test_gap_in_custom_buckets_raises(self):
        buckets = (AgeBucket("0-10", 0, 10), AgeBucket("20+", 20, None))
        with pytest.raises(ValueError, match="does not fit any bucket"):
            classify(15, buckets)

    def test_invalid_bucket_definition(self):
        with pytest.raises(ValueError):
            AgeBucket("bad", 10, 5)
        with pytest.raises(ValueError):
            AgeBucket("bad", -1, 5)


class TestAgeLots:
    """Tests for the full aging pass."""

    def test_two_lot_scenario(self):
        result = age_lots(
            lots=[_lot(45, "10", "5"), _lot(5, "4", "10")],
            as_of=NOW,
        )

        assert result.bucket_total("31-60") == Decimal("50")
        assert result.bucket_total("0-30") == Decimal("40")
        assert result.bucket_total("61-90") == Decimal("0")
        assert result.bucket_total("90+") == Decimal("0")
        assert result.total_value == Decimal("90")

    def test_every_bucket_reported_in_order(self):
        result = age_lots(lots=[], as_of=NOW)

        assert [b.name for b in result.buckets] == ["0-30", "31-60", "61-90", "90+"]
        assert all(b.value == 0 and b.lot_count == 0 for b in result.buckets)
        assert result.lots == ()

    def test_lots_listed_oldest_first(self):
        result = age_lots(
            lots=[_lot(3, "1", "1", "C"), _lot(120, "1", "1", "A"), _lot(40, "1", "1", "B")],
            as_of=NOW,
        )

        assert [lot.product_name for lot in result.lots] == ["A", "B", "C"]
        assert [lot.bucket for lot in result.lots] == ["90+", "31-60", "0-30"]

    def test_bucket_totals_sum_to_total(self):
        lots = [_lot(d, "3", "2.50") for d in (1, 29, 31, 59, 61, 89, 91, 365)]
        result = age_lots(lots=lots, as_of=NOW)

        assert sum(b.value for b in result.buckets) == result.total_value
        assert sum(b.lot_count for b in result.buckets) == len(lots)
        assert result.total_value == Decimal("60.00")

    def test_value_is_quantity_times_cost(self):
        result = age_lots(lots=[_lot(10, "2.5", "3.20")], as_of=NOW)
        assert result.lots[0].value == Decimal("8.000")

    def test_unknown_bucket_name_raises(self):
        result = age_lots(lots=[], as_of=NOW)
        with pytest.raises(KeyError):
            result.bucket_total("180+")

    def test_custom_buckets(self):
        buckets = (AgeBucket("fresh", 0, 7), AgeBucket("stale", 8, None))
        result = age_lots(lots=[_lot(3, "1", "4"), _lot(30, "1", "6")], as_of=NOW, buckets=buckets)

        assert result.bucket_total("fresh") == Decimal("4")
        assert result.bucket_total("stale") == Decimal("6")

    def test_emits_engine_trace(self, captured_logs):
        age_lots(lots=[_lot(1, "1", "1")], as_of=NOW)

        traces = [r for r in captured_logs() if r["message"] == "ENGINE_TRACE"]
        assert len(traces) == 1
        assert traces[0]["engine_name"] == "stock_aging"
        assert len(traces[0]["input_fingerprint"]) == 16
