"""Domain entities and value objects used by the Seq forwarder."""

from __future__ import annotations

from .entry import LogEntry
from .errors import (
    DeliveryError,
    EncodingFailed,
    RequestConstructionFailed,
    ResponseReadFailed,
    ServerRejected,
    TransportFailed,
)
from .levels import ALL_LEVELS, LogLevel
from .options import ForwarderOptions, with_api_key, with_diagnostic, with_levels, with_session

__all__ = [
    "ALL_LEVELS",
    "DeliveryError",
    "EncodingFailed",
    "ForwarderOptions",
    "LogEntry",
    "LogLevel",
    "RequestConstructionFailed",
    "ResponseReadFailed",
    "ServerRejected",
    "TransportFailed",
    "with_api_key",
    "with_diagnostic",
    "with_levels",
    "with_session",
]
