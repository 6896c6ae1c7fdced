"""
Module: bizledger_kernel.db.immutability
Responsibility: ORM-level append-only enforcement for the ledger and the
    inventory movement log.
Architecture position: Kernel > DB.  Imports models lazily (inside the
    listener functions) to avoid circular imports.

Protected entities:

    Entity               | Rule
    ---------------------|---------------------------------------------------
    JournalEntry         | No UPDATE, no DELETE (corrections are new entries)
    InventoryLedgerLine  | No UPDATE, no DELETE
    InventoryLot         | No DELETE (lots are soft-deactivated via is_active)
    Account              | code / account_type frozen once entries reference it

The reporting engine only reads.  These listeners protect the stores it reads
from against application code that writes through the same models: every
report assumes the rows it aggregates never change underneath it.

Usage:

    from bizledger_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()  # once at startup

To intentionally violate the rules in a test:

    unregister_immutability_listeners()
    ...
    register_immutability_listeners()
"""

from sqlalchemy import event, exists, select

from bizledger_kernel.exceptions import ImmutabilityViolationError
from bizledger_kernel.logging_config import get_logger

logger = get_logger("db.immutability")

# Fields that determine how an account's entries are classified and signed
ACCOUNT_STRUCTURAL_FIELDS = ("code", "account_type")


def _blocked(entity_type: str, entity_id, operation: str, reason: str) -> None:
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "operation": operation,
        },
    )
    raise ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=str(entity_id),
        reason=reason,
    )


def _check_journal_entry_update(mapper, connection, target):
    """Journal entries are immutable from creation."""
    _blocked("JournalEntry", target.id, "UPDATE", "Journal entries are append-only")


def _check_journal_entry_delete(mapper, connection, target):
    _blocked("JournalEntry", target.id, "DELETE", "Journal entries are append-only")


def _check_ledger_line_update(mapper, connection, target):
    """Inventory ledger lines are immutable from creation."""
    _blocked(
        "InventoryLedgerLine", target.id, "UPDATE",
        "Inventory ledger lines are append-only",
    )


def _check_ledger_line_delete(mapper, connection, target):
    _blocked(
        "InventoryLedgerLine", target.id, "DELETE",
        "Inventory ledger lines are append-only",
    )


def _check_lot_delete(mapper, connection, target):
    """
    Lots are never deleted.

    Quantity decrements and deactivation (is_active = False) are permitted.
    """
    _blocked(
        "InventoryLot", target.id, "DELETE",
        "Inventory lots are deactivated, not deleted",
    )


def _account_has_entries(connection, account_id) -> bool:
    from bizledger_kernel.models.journal import JournalEntry

    stmt = select(exists().where(JournalEntry.account_id == account_id))
    return bool(connection.execute(stmt).scalar())


def _check_account_structural_immutability(mapper, connection, target):
    """
    Block changes to code or account_type on referenced accounts.

    Non-structural fields (name, is_active) can still be modified.
    """
    from sqlalchemy.orm.attributes import get_history

    changed = [
        field for field in ACCOUNT_STRUCTURAL_FIELDS
        if get_history(target, field).has_changes()
    ]
    if not changed:
        return

    if _account_has_entries(connection, target.id):
        _blocked(
            "Account", target.id, "UPDATE",
            f"Cannot modify structural field(s) {changed} on account "
            "referenced by journal entries",
        )


def _listener_table():
    from bizledger_kernel.models.account import Account
    from bizledger_kernel.models.inventory import InventoryLedgerLine, InventoryLot
    from bizledger_kernel.models.journal import JournalEntry

    return (
        (JournalEntry, "before_update", _check_journal_entry_update),
        (JournalEntry, "before_delete", _check_journal_entry_delete),
        (InventoryLedgerLine, "before_update", _check_ledger_line_update),
        (InventoryLedgerLine, "before_delete", _check_ledger_line_delete),
        (InventoryLot, "before_delete", _check_lot_delete),
        (Account, "before_update", _check_account_structural_immutability),
    )


def register_immutability_listeners() -> None:
    """
    Register all append-only enforcement listeners.

    Idempotent: a listener that is already registered is not added twice.
    """
    for target, event_name, listener_fn in _listener_table():
        if not event.contains(target, event_name, listener_fn):
            event.listen(target, event_name, listener_fn)


def _safe_remove_listener(target, event_name, listener_fn):
    """Remove an event listener, ignoring it if not registered."""
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners() -> None:
    """
    Remove the append-only enforcement listeners.

    WARNING: Only use this in tests.
    """
    for target, event_name, listener_fn in _listener_table():
        _safe_remove_listener(target, event_name, listener_fn)
