"""
Module: bizledger_kernel.models.account
Responsibility: ORM persistence for the Chart of Accounts (COA) -- the target
    of every journal entry.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - (business_id, code) is unique.
    - account_type and code are immutable once referenced by journal entries
      (db/immutability.py).

Audit relevance:
    account_type decides which report section an account lands in and which
    side is its normal balance.  Changing it after entries exist would
    silently re-sign every historical balance, so it is locked.
"""

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bizledger_kernel.db.base import Base, UUIDString

if TYPE_CHECKING:
    from bizledger_kernel.models.journal import JournalEntry


class AccountType(str, Enum):
    """Types of accounts in the chart of accounts."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"


class NormalBalance(str, Enum):
    """Normal balance side for an account."""

    DEBIT = "debit"
    CREDIT = "credit"


class Account(Base):
    """
    Chart of Accounts entry, scoped to one business.

    Contract:
        Account.code is unique within a business (uq_account_business_code).
        Once an account is referenced by a JournalEntry its account_type and
        code MUST NOT change.

    Guarantees:
        - account_type is stored as one of the AccountType values.  Rows
          holding any other string are rejected at read time by the
          selectors (UnknownAccountTypeError), never defaulted.

    Non-goals:
        - No hierarchy and no contra-account flag.  A contra-asset (e.g.
          accumulated depreciation) typed as ASSET reports a negative net.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("business_id", "code", name="uq_account_business_code"),
        Index("idx_account_business_type", "business_id", "account_type"),
    )

    business_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    # Human-readable identifier, e.g. "1001"
    code: Mapped[str] = mapped_column(String(50), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    account_type: Mapped[str] = mapped_column(String(20), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    journal_entries: Mapped[list["JournalEntry"]] = relationship(
        back_populates="account",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return f"<Account {self.code}: {self.name}>"
