"""Compact Log Event Format (CLEF) rendering.

Purpose
-------
Turn a :class:`LogEntry` into the newline-terminated JSON record accepted by
Seq's raw ingestion endpoint.

Contents
--------
* :data:`CONTENT_TYPE` - media type announced on every request.
* :func:`format_timestamp` - RFC 3339 rendering with trimmed fractions.
* :func:`build_record` - dictionary view of the CLEF record.
* :func:`encode_entry` - bytes ready to POST.

System Role
-----------
Pure formatting; the forwarder calls :func:`encode_entry` before any network
activity so encoding problems never reach the wire.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any

from lib_log_seq.domain.entry import LogEntry
from lib_log_seq.domain.errors import EncodingFailed

CONTENT_TYPE = "application/vnd.serilog.clef"

KEY_TIMESTAMP = "@t"
KEY_LEVEL = "@l"
KEY_MESSAGE_TEMPLATE = "@mt"
KEY_EXCEPTION = "@x"

RESERVED_KEYS = frozenset({KEY_TIMESTAMP, KEY_LEVEL, KEY_MESSAGE_TEMPLATE, KEY_EXCEPTION})

_CLASH_PREFIX = "fields."


def format_timestamp(ts: datetime) -> str:
    """Render ``ts`` as RFC 3339 with trailing zero fractions removed.

    Examples
    --------
    >>> from datetime import timezone
    >>> format_timestamp(datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
    '2025-01-02T03:04:05Z'
    >>> format_timestamp(datetime(2025, 1, 2, 3, 4, 5, 120000, tzinfo=timezone.utc))
    '2025-01-02T03:04:05.12Z'
    >>> format_timestamp(datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=-5, minutes=-30))))
    '2025-01-02T03:04:05-05:30'
    """
    text = (
        f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"
        f"T{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
    )
    if ts.microsecond:
        text += f".{ts.microsecond:06d}".rstrip("0")
    return text + _format_offset(ts.utcoffset())


def _format_offset(offset: timedelta | None) -> str:
    if not offset:
        return "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def _field_value(value: Any) -> Any:
    if isinstance(value, BaseException):
        return str(value)
    return value


def build_record(entry: LogEntry) -> dict[str, Any]:
    """Return the CLEF mapping for ``entry`` before JSON encoding.

    Structured fields keep their names, except those colliding with a reserved
    key, which move to ``fields.<name>``.

    Examples
    --------
    >>> from datetime import timezone
    >>> from lib_log_seq.domain.levels import LogLevel
    >>> entry = LogEntry("Hi {User}", LogLevel.INFO, datetime(2025, 1, 1, tzinfo=timezone.utc), {"User": "ada", "@l": "x"})
    >>> record = build_record(entry)
    >>> record["@mt"], record["@l"], record["User"], record["fields.@l"]
    ('Hi {User}', 'info', 'ada', 'x')
    """
    record: dict[str, Any] = {}
    for key, value in entry.fields.items():
        name = f"{_CLASH_PREFIX}{key}" if key in RESERVED_KEYS else key
        record[name] = _field_value(value)

    record[KEY_TIMESTAMP] = format_timestamp(entry.timestamp)
    record[KEY_LEVEL] = entry.level.severity
    record[KEY_MESSAGE_TEMPLATE] = entry.message
    if entry.exception is not None:
        record[KEY_EXCEPTION] = entry.exception
    return record


def encode_entry(entry: LogEntry) -> bytes:
    """Serialize ``entry`` into one compact, newline-terminated CLEF line.

    Raises
    ------
    EncodingFailed
        When a field value (or key) cannot be represented as JSON, including
        ``NaN`` and infinities.
    """
    record = build_record(entry)
    try:
        text = json.dumps(record, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        return (text + "\n").encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodingFailed(f"failed to encode log entry as CLEF: {exc}") from exc


__all__ = [
    "CONTENT_TYPE",
    "KEY_EXCEPTION",
    "KEY_LEVEL",
    "KEY_MESSAGE_TEMPLATE",
    "KEY_TIMESTAMP",
    "RESERVED_KEYS",
    "build_record",
    "encode_entry",
    "format_timestamp",
]
