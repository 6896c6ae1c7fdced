"""
Module: bizledger_kernel.models.journal
Responsibility: ORM persistence for journal entries -- the single source of
    financial truth the reports aggregate.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from selectors/, domain/, or outer layers.

Invariants enforced:
    - debit >= 0 and credit >= 0 (CHECK constraints).
    - Immutability: UPDATE and DELETE are blocked by ORM listeners in
      db/immutability.py.  Corrections are new reversing entries.
    - Summed over all entries of a business, debits equal credits.  Posting
      code enforces this per transaction; this model does not.

Failure modes:
    - IntegrityError on a negative amount.
    - ImmutabilityViolationError on UPDATE/DELETE.

Audit relevance:
    No running balance is stored anywhere.  Every balance a report shows is
    re-derived from these rows at query time.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bizledger_kernel.db.base import Base, UUIDString
from bizledger_kernel.db.types import Money

if TYPE_CHECKING:
    from bizledger_kernel.models.account import Account


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JournalEntry(Base):
    """
    One debit or credit movement against one account.

    Contract:
        A posted transaction is several JournalEntry rows sharing a
        ``reference``; together they balance.  Each row carries a debit, a
        credit, or (rarely) both, never a negative amount.

    Guarantees:
        - transaction_date is a calendar date; all report cutoffs compare
          against it inclusively.
        - Rows are append-only.

    Non-goals:
        - No currency column: a business reports in one currency.
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        CheckConstraint("debit >= 0", name="ck_journal_entry_debit_nonneg"),
        CheckConstraint("credit >= 0", name="ck_journal_entry_credit_nonneg"),
        Index("idx_journal_business_date", "business_id", "transaction_date"),
        Index("idx_journal_account_date", "account_id", "transaction_date"),
    )

    business_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)

    debit: Mapped[Money] = mapped_column(default=Decimal("0"), nullable=False)
    credit: Mapped[Money] = mapped_column(default=Decimal("0"), nullable=False)

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Groups the rows of one posted transaction (invoice no., receipt no.)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    account: Mapped["Account"] = relationship(back_populates="journal_entries")

    def __repr__(self) -> str:
        return (
            f"<JournalEntry {self.transaction_date} "
            f"dr={self.debit} cr={self.credit}>"
        )
