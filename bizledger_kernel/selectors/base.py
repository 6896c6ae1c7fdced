"""
Module: bizledger_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
Architecture position: Kernel > Selectors.  May import from db/, models/
    and domain/.  MUST NOT import from engines or reporting modules.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller but MUST
      NOT call session.add(), session.delete(), session.commit() or
      session.flush().
    - DTO return convention: selectors return frozen dataclasses, NOT ORM
      model instances.
    - Session ownership: the caller owns the session and its scope.

Failure modes:
    - QueryError wrapping any SQLAlchemyError raised while executing.
"""

from abc import ABC

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bizledger_kernel.exceptions import QueryError
from bizledger_kernel.logging_config import get_logger

logger = get_logger("selectors")


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries
        and return DTOs.  They MUST NOT mutate any data.

    Guarantees:
        - A driver failure surfaces as QueryError (named after the query),
          never as a partially consumed result.
    """

    def __init__(self, session: Session):
        self.session = session

    def _execute(self, query_name: str, stmt) -> list:
        """Execute ``stmt`` and return all rows, translating driver errors."""
        try:
            return list(self.session.execute(stmt).all())
        except SQLAlchemyError as exc:
            logger.error(
                "selector_query_failed",
                extra={"query_name": query_name, "error": str(exc)},
            )
            raise QueryError(query_name, str(exc)) from exc
