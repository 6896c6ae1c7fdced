"""
Module: bizledger_engines.aging
Responsibility:
    Classify inventory lots into age buckets and total the stock value held
    in each bucket.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import bizledger_kernel.domain (and the logging facade).

Invariants enforced:
    - Purity: the "now" instant is a parameter; no clock access.
    - Decimal-only arithmetic: value = quantity * cost_price.
    - Every lot lands in exactly one bucket; bucket totals sum to the total
      stock value.

Failure modes:
    - ValueError when an age does not fall into any configured bucket
      (only possible with a malformed custom bucket sequence).

Usage:
    from bizledger_engines.aging import STOCK_AGING_BUCKETS, age_lots

    result = age_lots(lots=snapshots, as_of=clock.now())
    result.bucket_total("31-60")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from bizledger_engines.tracer import traced_engine
from bizledger_kernel.domain.dtos import LotSnapshot
from bizledger_kernel.logging_config import get_logger

logger = get_logger("engines.aging")


@dataclass(frozen=True)
class AgeBucket:
    """
    Definition of an aging bucket.

    Guarantees:
        - min_days >= 0.
        - max_days >= min_days (when bounded).
    """

    name: str
    min_days: int
    max_days: int | None  # None = unbounded (e.g., 90+)

    def __post_init__(self) -> None:
        if self.min_days < 0:
            raise ValueError("min_days cannot be negative")
        if self.max_days is not None and self.max_days < self.min_days:
            raise ValueError("max_days cannot be less than min_days")

    def contains(self, age_days: int) -> bool:
        """Check if age falls within this bucket."""
        if age_days < self.min_days:
            return False
        if self.max_days is None:
            return True
        return age_days <= self.max_days


STOCK_AGING_BUCKETS: tuple[AgeBucket, ...] = (
    AgeBucket("0-30", 0, 30),
    AgeBucket("31-60", 31, 60),
    AgeBucket("61-90", 61, 90),
    AgeBucket("90+", 91, None),
)


@dataclass(frozen=True)
class AgedLot:
    """A lot with its computed age, bucket and value."""

    lot_id: UUID
    product_id: UUID
    product_name: str
    sku: str | None
    batch_number: str | None
    quantity: Decimal
    cost_price: Decimal
    value: Decimal
    received_at: datetime
    age_days: int
    bucket: str
    expiry_date: date | None = None


@dataclass(frozen=True)
class BucketTotal:
    name: str
    value: Decimal
    lot_count: int


@dataclass(frozen=True)
class StockAgingResult:
    """
    Aging of all supplied lots.

    Guarantees:
        - ``buckets`` lists every configured bucket in order, zero-valued
          when empty.
        - ``lots`` is ordered oldest first.
    """

    as_of: datetime
    lots: tuple[AgedLot, ...]
    buckets: tuple[BucketTotal, ...]

    @property
    def total_value(self) -> Decimal:
        return sum((b.value for b in self.buckets), Decimal("0"))

    def bucket_total(self, name: str) -> Decimal:
        for bucket in self.buckets:
            if bucket.name == name:
                return bucket.value
        raise KeyError(name)


def calculate_age_days(received_at: datetime, as_of: datetime) -> int:
    """
    Whole days elapsed between receipt and ``as_of``.

    A lot stamped after ``as_of`` (clock skew between writers) ages as 0.
    """
    return max(0, (as_of - received_at).days)


def classify(age_days: int, buckets: Sequence[AgeBucket]) -> AgeBucket:
    """
    Return the bucket containing ``age_days``.

    Raises:
        ValueError: If age doesn't fit any bucket.
    """
    for bucket in buckets:
        if bucket.contains(age_days):
            return bucket

    logger.warning("age_classification_no_bucket", extra={
        "age_days": age_days,
        "bucket_count": len(buckets),
    })
    raise ValueError(f"Age {age_days} does not fit any bucket")


@traced_engine("stock_aging", "1.0", fingerprint_fields=("as_of",))
def age_lots(
    *,
    lots: Sequence[LotSnapshot],
    as_of: datetime,
    buckets: Sequence[AgeBucket] = STOCK_AGING_BUCKETS,
) -> StockAgingResult:
    """
    Age every lot as of ``as_of`` and total value per bucket.

    Lots are expected to be active with positive quantity; the selector
    applies that filter.
    """
    totals = {b.name: Decimal("0") for b in buckets}
    counts = {b.name: 0 for b in buckets}
    aged: list[AgedLot] = []

    for lot in lots:
        age = calculate_age_days(lot.created_at, as_of)
        bucket = classify(age, buckets)
        value = lot.quantity * lot.cost_price
        totals[bucket.name] += value
        counts[bucket.name] += 1
        aged.append(
            AgedLot(
                lot_id=lot.lot_id,
                product_id=lot.product_id,
                product_name=lot.product_name,
                sku=lot.sku,
                batch_number=lot.batch_number,
                quantity=lot.quantity,
                cost_price=lot.cost_price,
                value=value,
                received_at=lot.created_at,
                age_days=age,
                bucket=bucket.name,
                expiry_date=lot.expiry_date,
            )
        )

    aged.sort(key=lambda a: (-a.age_days, a.received_at, str(a.lot_id)))

    return StockAgingResult(
        as_of=as_of,
        lots=tuple(aged),
        buckets=tuple(
            BucketTotal(name=b.name, value=totals[b.name], lot_count=counts[b.name])
            for b in buckets
        ),
    )
