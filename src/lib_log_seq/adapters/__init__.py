"""Adapters: CLEF rendering, the HTTP forwarder, and the stdlib logging binding."""

from __future__ import annotations

from .clef import CONTENT_TYPE, encode_entry, format_timestamp
from .logging_handler import SeqHandler, attach, record_to_entry
from .seq import INGESTION_PATH, SeqForwarder, create_forwarder

__all__ = [
    "CONTENT_TYPE",
    "INGESTION_PATH",
    "SeqForwarder",
    "SeqHandler",
    "attach",
    "create_forwarder",
    "encode_entry",
    "format_timestamp",
    "record_to_entry",
]
