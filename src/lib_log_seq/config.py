"""Environment-driven configuration for building a forwarder.

Purpose
-------
Resolve the Seq URL, API key and accepted levels from explicit arguments, the
process environment, and optionally the nearest ``.env`` file, then construct
a :class:`SeqForwarder`.

Contents
--------
* ``SEQ_*`` environment variable names.
* :func:`enable_dotenv` - load the nearest ``.env`` without overriding.
* :func:`parse_levels` - comma-separated level names to a level set.
* :class:`ForwarderSettings` / :func:`load_settings` - resolved settings.
* :func:`forwarder_from_env` - settings straight into a forwarder.

System Role
-----------
Outer layer used by the CLI and by host applications that prefer twelve-factor
configuration. The forwarder itself never reads the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from lib_log_seq.adapters.seq import SeqForwarder
from lib_log_seq.domain.levels import ALL_LEVELS, LogLevel
from lib_log_seq.domain.options import Option, with_api_key, with_levels

URL_ENV_VAR = "SEQ_URL"
API_KEY_ENV_VAR = "SEQ_API_KEY"
LEVELS_ENV_VAR = "SEQ_LEVELS"
DOTENV_ENV_VAR = "SEQ_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

_dotenv_loaded: Path | None = None


def enable_dotenv() -> Path | None:
    """Load the nearest ``.env`` above the working directory.

    Existing environment variables keep precedence. Returns the loaded file or
    ``None`` when no file was found. Repeated calls reuse the first result.
    """
    global _dotenv_loaded
    if _dotenv_loaded is not None:
        return _dotenv_loaded
    found = find_dotenv(usecwd=True)
    if not found:
        return None
    path = Path(found).resolve()
    load_dotenv(path, override=False)
    _dotenv_loaded = path
    return path


def _reset_dotenv_state_for_testing() -> None:
    global _dotenv_loaded
    _dotenv_loaded = None


def dotenv_requested(flag: bool | None) -> bool:
    """Return whether ``.env`` loading is wanted; an explicit flag wins over the environment.

    Examples
    --------
    >>> _ = os.environ.pop(DOTENV_ENV_VAR, None)
    >>> dotenv_requested(None), dotenv_requested(True)
    (False, True)
    >>> os.environ[DOTENV_ENV_VAR] = 'on'
    >>> dotenv_requested(None), dotenv_requested(False)
    (True, False)
    >>> _ = os.environ.pop(DOTENV_ENV_VAR)
    """
    if flag is not None:
        return flag
    return os.getenv(DOTENV_ENV_VAR, "").strip().lower() in _TRUTHY


def parse_levels(raw: str | None) -> frozenset[LogLevel]:
    """Parse ``"warning,error"`` style strings; blank means every level.

    Examples
    --------
    >>> sorted(level.name for level in parse_levels("warn, ERROR"))
    ['ERROR', 'WARNING']
    >>> parse_levels("") == ALL_LEVELS
    True
    >>> parse_levels("loud")
    Traceback (most recent call last):
    ...
    ValueError: Unknown log level: 'loud'
    """
    if raw is None or not raw.strip():
        return ALL_LEVELS
    return frozenset(LogLevel.from_name(chunk) for chunk in raw.split(",") if chunk.strip())


@dataclass(frozen=True)
class ForwarderSettings:
    """Resolved forwarder settings."""

    url: str
    api_key: str | None
    levels: frozenset[LogLevel]

    def options(self) -> list[Option]:
        opts: list[Option] = [with_levels(self.levels)]
        if self.api_key:
            opts.append(with_api_key(self.api_key))
        return opts


def load_settings(
    *,
    url: str | None = None,
    api_key: str | None = None,
    levels: str | None = None,
) -> ForwarderSettings:
    """Resolve settings; explicit arguments override ``SEQ_*`` variables."""

    resolved_url = url or os.getenv(URL_ENV_VAR)
    if not resolved_url:
        raise ValueError(f"Seq URL missing: pass it explicitly or set {URL_ENV_VAR}")
    resolved_key = api_key if api_key is not None else os.getenv(API_KEY_ENV_VAR)
    resolved_levels = parse_levels(levels if levels is not None else os.getenv(LEVELS_ENV_VAR))
    return ForwarderSettings(url=resolved_url.rstrip("/"), api_key=resolved_key or None, levels=resolved_levels)


def forwarder_from_env(*extra: Option, **overrides: str | None) -> SeqForwarder:
    """Build a :class:`SeqForwarder` from :func:`load_settings` plus ``extra`` options."""

    settings = load_settings(**overrides)
    return SeqForwarder(settings.url, *settings.options(), *extra)


__all__ = [
    "API_KEY_ENV_VAR",
    "DOTENV_ENV_VAR",
    "ForwarderSettings",
    "LEVELS_ENV_VAR",
    "URL_ENV_VAR",
    "dotenv_requested",
    "enable_dotenv",
    "forwarder_from_env",
    "load_settings",
    "parse_levels",
]
