"""Forward structured log entries to Seq as CLEF events over HTTP.

Hosts build one :class:`SeqForwarder` per process, ask it which levels it
accepts, and call :meth:`SeqForwarder.deliver` for each qualifying entry.
Applications using :mod:`logging` can :func:`attach` a :class:`SeqHandler`
instead.

Examples
--------
>>> forwarder = create_forwarder("http://localhost:5341", with_api_key("N1ncujiT5pYGD6m4CF0"))
>>> forwarder.endpoint
'http://localhost:5341/api/events/raw'
"""

from __future__ import annotations

from .adapters import SeqForwarder, SeqHandler, attach, create_forwarder
from .application.ports import HookPort
from .domain import (
    ALL_LEVELS,
    DeliveryError,
    EncodingFailed,
    LogEntry,
    LogLevel,
    RequestConstructionFailed,
    ResponseReadFailed,
    ServerRejected,
    TransportFailed,
    with_api_key,
    with_diagnostic,
    with_levels,
    with_session,
)

__all__ = [
    "ALL_LEVELS",
    "DeliveryError",
    "EncodingFailed",
    "HookPort",
    "LogEntry",
    "LogLevel",
    "RequestConstructionFailed",
    "ResponseReadFailed",
    "SeqForwarder",
    "SeqHandler",
    "ServerRejected",
    "TransportFailed",
    "attach",
    "create_forwarder",
    "with_api_key",
    "with_diagnostic",
    "with_levels",
    "with_session",
]
