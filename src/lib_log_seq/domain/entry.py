"""Structured log entry handed to the forwarder by the host framework.

Purpose
-------
Provide an immutable representation of one log event for the duration of a
single delivery call.

Contents
--------
* :class:`LogEntry` dataclass.
* Utility function ``_ensure_aware`` for timestamp validation.

System Role
-----------
Sits in the domain layer; the CLEF formatter reads it and the stdlib binding
builds it from ``logging.LogRecord`` objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .levels import LogLevel


def _ensure_aware(ts: datetime) -> datetime:
    """Reject naive timestamps; the wire format always carries an offset."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts


@dataclass(slots=True, frozen=True)
class LogEntry:
    """Immutable log entry consumed by :class:`SeqForwarder`.

    Attributes
    ----------
    message:
        Message template, written to ``@mt``. May be empty.
    level:
        :class:`LogLevel` severity, written to ``@l``.
    timestamp:
        Timezone-aware time of the event, written to ``@t``. The original
        offset is preserved.
    fields:
        Shallow copy of structured name/value pairs, each written under its
        own key.
    exception:
        Optional rendered exception text, written to ``@x``.
    """

    message: str
    level: LogLevel
    timestamp: datetime
    fields: dict[str, Any] = field(default_factory=dict)
    exception: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _ensure_aware(self.timestamp))
        object.__setattr__(self, "fields", dict(self.fields))

    def with_fields(self, **fields: Any) -> "LogEntry":
        """Return a copy with ``fields`` merged over the existing ones."""

        return replace(self, fields={**self.fields, **fields})


__all__ = ["LogEntry"]
