"""
Bizledger Kernel

Persistence, domain rules and read-only selectors for a business's
double-entry journal and inventory movement log:
- Append-only journal entries and inventory ledger lines
- Balances always derived at query time, never stored
- Decimal fixed-point amounts throughout
"""

__version__ = "0.1.0"
