"""Domain models for the bizledger kernel."""

from bizledger_kernel.models.account import Account, AccountType, NormalBalance
from bizledger_kernel.models.inventory import (
    InventoryLedgerLine,
    InventoryLot,
    Product,
)
from bizledger_kernel.models.journal import JournalEntry

__all__ = [
    "Account",
    "AccountType",
    "NormalBalance",
    "JournalEntry",
    "Product",
    "InventoryLot",
    "InventoryLedgerLine",
]
