"""
Module: bizledger_kernel.logging_config
Responsibility: JSON-lines logging for the ``bizledger`` logger tree, with
    the current report request's identity stamped on every record.
Architecture position: Kernel.  Imported by every layer; imports nothing
    from bizledger.

Record layout (one JSON object per line):
    ts, level, logger, message, then the bound request fields
    (request_id, business_id, report_type, actor_id), then the record's
    ``extra`` fields, then an ``exception`` object when exc_info is set.
    A BizLedgerError's ``code`` and public attributes appear inside
    ``exception`` so a failed report can be traced without parsing text.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

_ROOT = "bizledger"

REQUEST_FIELDS = ("request_id", "business_id", "report_type", "actor_id")

_EMPTY: Mapping[str, str] = MappingProxyType({})

_request_fields: ContextVar[Mapping[str, str]] = ContextVar(
    "bizledger_request_fields", default=_EMPTY,
)


class LogContext:
    """
    Request fields attached to every record written while they are bound.

    The fields live in one immutable mapping per context, so each thread
    and each asyncio task sees only its own request.  ``bind`` layers new
    fields over the current ones and restores the previous mapping on exit.
    """

    @staticmethod
    def current() -> dict[str, str]:
        return dict(_request_fields.get())

    @staticmethod
    @contextmanager
    def bind(**fields: object) -> Iterator[None]:
        """
        Bind request fields for the duration of the block.

        None values are skipped; other values are stored as strings.

        Raises:
            TypeError: a field name outside REQUEST_FIELDS.
        """
        unknown = sorted(set(fields) - set(REQUEST_FIELDS))
        if unknown:
            raise TypeError(f"unknown log context fields: {', '.join(unknown)}")

        merged = dict(_request_fields.get())
        merged.update({k: str(v) for k, v in fields.items() if v is not None})
        token = _request_fields.set(MappingProxyType(merged))
        try:
            yield
        finally:
            _request_fields.reset(token)

    @staticmethod
    def clear() -> None:
        _request_fields.set(_EMPTY)


# Attributes every LogRecord has; anything else on a record came from extra=
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    # UUIDs and anything else unforeseen
    return str(obj)


def _describe_exception(exc: BaseException) -> dict[str, Any]:
    described: dict[str, Any] = {
        "type": type(exc).__name__,
        "message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        described["code"] = code
    fields = {k: v for k, v in vars(exc).items() if not k.startswith("_")}
    if fields:
        described["fields"] = fields
    return described


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_request_fields.get(),
        }
        payload.update(
            (key, val)
            for key, val in vars(record).items()
            if key not in _RECORD_ATTRS and key not in payload
        )

        if record.exc_info and record.exc_info[1] is not None:
            exception = _describe_exception(record.exc_info[1])
            exception["traceback"] = self.formatException(record.exc_info)
            payload["exception"] = exception

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger ``bizledger.<name>``."""
    return logging.getLogger(f"{_ROOT}.{name}")


_install_lock = threading.Lock()


def _installed_handler(root: logging.Logger) -> logging.Handler | None:
    for handler in root.handlers:
        if getattr(handler, "_bizledger_installed", False):
            return handler
    return None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install the JSON handler on the ``bizledger`` logger.

    Only the first call has any effect; later calls (for example from
    engine initialization) leave the existing handler and level alone.
    """
    root = logging.getLogger(_ROOT)
    with _install_lock:
        if _installed_handler(root) is not None:
            return
        installed = handler if handler is not None else logging.StreamHandler(
            stream or sys.stderr
        )
        installed.setFormatter(StructuredFormatter())
        installed._bizledger_installed = True
        root.addHandler(installed)
        root.setLevel(level)
        root.propagate = False


def reset_logging() -> None:
    """Remove the installed handler and restore stdlib defaults.  Tests only."""
    root = logging.getLogger(_ROOT)
    with _install_lock:
        installed = _installed_handler(root)
        if installed is not None:
            root.removeHandler(installed)
        root.setLevel(logging.NOTSET)
        root.propagate = True
