"""Forwarder construction options.

Purpose
-------
Collect non-default forwarder settings while a forwarder is being built. Each
option is a small callable that mutates a :class:`ForwarderOptions` draft; the
forwarder copies the final values and discards the draft.

Contents
--------
* :class:`ForwarderOptions` - mutable draft with defaults.
* :func:`with_api_key`, :func:`with_levels`, :func:`with_session`,
  :func:`with_diagnostic` - option factories.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

from .levels import ALL_LEVELS, LogLevel

if TYPE_CHECKING:  # pragma: no cover - typing only
    import requests

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None


@dataclass(slots=True)
class ForwarderOptions:
    """In-progress settings; later options overwrite earlier ones."""

    api_key: str | None = None
    levels: frozenset[LogLevel] = ALL_LEVELS
    session: "requests.Session | None" = None
    diagnostic: DiagnosticHook = None


Option = Callable[[ForwarderOptions], None]


def with_api_key(api_key: str) -> Option:
    """Send ``api_key`` as ``X-Seq-ApiKey`` on every request.

    Examples
    --------
    >>> opts = ForwarderOptions()
    >>> with_api_key("N1ncujiT5pYGD6m4CF0")(opts)
    >>> opts.api_key
    'N1ncujiT5pYGD6m4CF0'
    """

    def _apply(opts: ForwarderOptions) -> None:
        opts.api_key = api_key

    return _apply


def with_levels(levels: Iterable[LogLevel]) -> Option:
    """Replace the accepted-level set with exactly ``levels``.

    Examples
    --------
    >>> opts = ForwarderOptions()
    >>> with_levels([LogLevel.WARNING, LogLevel.ERROR])(opts)
    >>> sorted(level.name for level in opts.levels)
    ['ERROR', 'WARNING']
    """

    frozen = frozenset(levels)

    def _apply(opts: ForwarderOptions) -> None:
        opts.levels = frozen

    return _apply


def with_session(session: "requests.Session") -> Option:
    """Deliver through ``session`` instead of a forwarder-owned one."""

    def _apply(opts: ForwarderOptions) -> None:
        opts.session = session

    return _apply


def with_diagnostic(hook: DiagnosticHook) -> Option:
    """Notify ``hook(event_name, payload)`` about each delivery outcome."""

    def _apply(opts: ForwarderOptions) -> None:
        opts.diagnostic = hook

    return _apply


def resolve_options(options: Iterable[Option]) -> ForwarderOptions:
    """Apply ``options`` in order over a fresh draft and return it."""

    draft = ForwarderOptions()
    for option in options:
        option(draft)
    return draft


__all__ = [
    "DiagnosticHook",
    "ForwarderOptions",
    "Option",
    "resolve_options",
    "with_api_key",
    "with_diagnostic",
    "with_levels",
    "with_session",
]
