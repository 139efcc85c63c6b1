"""Severity levels understood by the Seq forwarder.

Purpose
-------
Offer a domain-specific representation of the seven severities a host logging
framework can hand to the forwarder, together with the lowercase names written
into the ``@l`` property of CLEF records.

Contents
--------
* :class:`LogLevel` enum with conversion helpers.
* :data:`ALL_LEVELS` - the default accepted-level set.

System Role
-----------
Used by the forwarder to filter entries, by the CLEF formatter to name the
level on the wire, and by the stdlib binding to translate ``logging`` numbers.
"""

from __future__ import annotations

import logging
from enum import Enum


class LogLevel(Enum):
    """Ordered severities, least to most important."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    FATAL = 50
    PANIC = 60

    @property
    def severity(self) -> str:
        """Return the lowercase severity name used in ``@l``."""

        return self.name.lower()

    def to_python_level(self) -> int:
        """Return the closest :mod:`logging` numeric level."""

        return _PYTHON_LEVELS[self]

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_numeric(cls, level: int) -> "LogLevel":
        """Return the :class:`LogLevel` whose value is exactly ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Map any stdlib ``logging`` number onto the nearest level at or below it.

        Examples
        --------
        >>> LogLevel.from_python_level(logging.WARNING) is LogLevel.WARNING
        True
        >>> LogLevel.from_python_level(logging.CRITICAL) is LogLevel.FATAL
        True
        >>> LogLevel.from_python_level(25) is LogLevel.INFO
        True
        >>> LogLevel.from_python_level(1) is LogLevel.TRACE
        True
        """
        chosen = cls.TRACE
        for candidate in cls:
            if candidate.value <= level:
                chosen = candidate
        return chosen


_ALIASES = {
    "WARN": "WARNING",
    "CRITICAL": "FATAL",
}
# Alternate spellings accepted by :meth:`LogLevel.from_name`.

_PYTHON_LEVELS = {
    LogLevel.TRACE: 5,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
    LogLevel.PANIC: logging.CRITICAL + 10,
}

ALL_LEVELS: frozenset[LogLevel] = frozenset(LogLevel)
"""Every defined severity; the forwarder's default accepted set."""


__all__ = ["ALL_LEVELS", "LogLevel"]
