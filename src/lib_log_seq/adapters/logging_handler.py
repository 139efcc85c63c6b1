"""Binding between the stdlib :mod:`logging` framework and a forwarder.

Purpose
-------
Let applications that log through :mod:`logging` ship records to Seq without
knowing about :class:`LogEntry`. The handler consults the forwarder's accepted
levels per record and hands qualifying records over synchronously.

Contents
--------
* :func:`record_to_entry` - translate a ``LogRecord`` into a :class:`LogEntry`.
* :class:`SeqHandler` - ``logging.Handler`` delegating to a :class:`HookPort`.
* :func:`attach` - install a handler on a logger.

System Role
-----------
The host side of the plugin contract. Delivery failures are routed to
:meth:`logging.Handler.handleError`, leaving the reaction (print, ignore,
raise) to the host's ``logging.raiseExceptions`` policy.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from lib_log_seq.application.ports.hook import HookPort
from lib_log_seq.domain.entry import LogEntry
from lib_log_seq.domain.levels import LogLevel

SOURCE_CONTEXT_FIELD = "SourceContext"

_STANDARD_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}
# Attributes every LogRecord carries; anything else arrived through ``extra=``.

_EXCEPTION_FORMATTER = logging.Formatter()


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in vars(record).items() if key not in _STANDARD_RECORD_ATTRS}


def record_to_entry(record: logging.LogRecord, formatter: logging.Formatter | None = None) -> LogEntry:
    """Translate ``record`` into a :class:`LogEntry`.

    Examples
    --------
    >>> record = logging.makeLogRecord({"name": "app", "levelno": logging.WARNING, "msg": "disk %s", "args": ("full",)})
    >>> record.order_id = 42
    >>> entry = record_to_entry(record)
    >>> entry.message, entry.level.name, entry.fields["order_id"], entry.fields["SourceContext"]
    ('disk full', 'WARNING', 42, 'app')
    """
    fields: dict[str, Any] = {SOURCE_CONTEXT_FIELD: record.name}
    fields.update(_extra_fields(record))

    exception: str | None = None
    if record.exc_info:
        exception = (formatter or _EXCEPTION_FORMATTER).formatException(record.exc_info)
    elif record.exc_text:
        exception = record.exc_text

    return LogEntry(
        message=record.getMessage(),
        level=LogLevel.from_python_level(record.levelno),
        timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
        fields=fields,
        exception=exception,
    )


class SeqHandler(logging.Handler):
    """Forward accepted records to a :class:`HookPort` on the logging thread."""

    def __init__(self, forwarder: HookPort, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._forwarder = forwarder
        self._accepted = forwarder.accepted_levels()

    @property
    def forwarder(self) -> HookPort:
        return self._forwarder

    def filter(self, record: logging.LogRecord) -> Any:
        if LogLevel.from_python_level(record.levelno) not in self._accepted:
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._forwarder.deliver(record_to_entry(record, self.formatter))
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def attach(forwarder: HookPort, logger: logging.Logger | None = None, *, level: int = logging.NOTSET) -> SeqHandler:
    """Install a :class:`SeqHandler` on ``logger`` (the root logger by default)."""

    handler = SeqHandler(forwarder, level=level)
    (logger or logging.getLogger()).addHandler(handler)
    return handler


__all__ = ["SOURCE_CONTEXT_FIELD", "SeqHandler", "attach", "record_to_entry"]
