"""Port describing what a host logging framework needs from a forwarder."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_seq.domain.entry import LogEntry
from lib_log_seq.domain.levels import LogLevel


@runtime_checkable
class HookPort(Protocol):
    """Level filter plus synchronous delivery of a single entry."""

    def accepted_levels(self) -> frozenset[LogLevel]:
        """Return the levels for which :meth:`deliver` should be called."""

    def deliver(self, entry: LogEntry) -> None:
        """Deliver ``entry``; raise :class:`DeliveryError` on failure."""


__all__ = ["HookPort"]
