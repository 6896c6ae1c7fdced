"""
Pure domain layer.

Data transfer objects and domain rules with NO dependency on the database,
the clock (other than the Clock abstraction itself) or I/O.
"""

from bizledger_kernel.domain.balances import (
    natural_balance,
    normal_balance_for,
    parse_account_type,
)
from bizledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from bizledger_kernel.domain.dtos import (
    AccountBalanceRow,
    AccountInfo,
    AccountTypeTotal,
    LedgerMovement,
    LotSnapshot,
    MonthlyTypeTotal,
)

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "normal_balance_for",
    "natural_balance",
    "parse_account_type",
    "AccountInfo",
    "AccountBalanceRow",
    "AccountTypeTotal",
    "MonthlyTypeTotal",
    "LotSnapshot",
    "LedgerMovement",
]
