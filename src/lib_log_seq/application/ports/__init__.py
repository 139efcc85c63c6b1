"""Protocols the host-facing adapters implement."""

from __future__ import annotations

from .hook import HookPort

__all__ = ["HookPort"]
