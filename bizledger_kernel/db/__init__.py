"""Database layer - engine, base classes, types, and append-only guards."""

from bizledger_kernel.db.base import UUID, Base, UUIDString
from bizledger_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session_factory,
    init_engine_from_url,
    read_scope,
    reset_engine,
)
from bizledger_kernel.db.types import Money, Quantity

__all__ = [
    "init_engine_from_url",
    "get_engine",
    "get_session_factory",
    "read_scope",
    "create_tables",
    "drop_tables",
    "reset_engine",
    "Base",
    "UUIDString",
    "UUID",
    "Money",
    "Quantity",
]
