"""Read-only selectors over the ledger and inventory stores."""

from bizledger_kernel.selectors.base import BaseSelector
from bizledger_kernel.selectors.inventory_selector import InventorySelector
from bizledger_kernel.selectors.ledger_selector import LedgerSelector

__all__ = [
    "BaseSelector",
    "LedgerSelector",
    "InventorySelector",
]
