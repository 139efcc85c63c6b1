"""Click command group for probing a Seq endpoint from the shell.

Purpose
-------
Give operators a quick way to check that a Seq URL and API key accept events
(``send``) and to see which levels a configuration forwards (``levels``).

Contents
--------
* :func:`cli` - root group with traceback and dotenv toggles.
* ``info``, ``levels``, ``send`` subcommands.
* :func:`main` - entry point wrapping ``lib_cli_exit_tools.run_cli``.

System Role
-----------
Presentation layer only; every command goes through :mod:`lib_log_seq.config`
and the same :class:`SeqForwarder` hosts use.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Sequence

import click
import lib_cli_exit_tools
from rich.console import Console

from . import __init__conf__
from . import config
from .domain.entry import LogEntry
from .domain.errors import DeliveryError
from .domain.levels import LogLevel

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

_LEVEL_CHOICES = click.Choice([level.severity for level in LogLevel], case_sensitive=False)


def _console() -> Console:
    return Console(soft_wrap=True, highlight=False)


def _parse_field(raw: str) -> tuple[str, Any]:
    """Split ``KEY=VALUE``; values that parse as JSON keep their JSON type.

    Examples
    --------
    >>> _parse_field("count=3")
    ('count', 3)
    >>> _parse_field("user=ada")
    ('user', 'ada')
    """
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint="--field")
    try:
        return key.strip(), json.loads(value)
    except ValueError:
        return key.strip(), value


def _build_forwarder(**overrides: str | None):
    try:
        return config.forwarder_from_env(**overrides)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load the nearest .env file before reading SEQ_* settings (default: ${config.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool | None) -> None:
    """Send probe events to Seq and inspect forwarder configuration."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    if config.dotenv_requested(use_dotenv):
        config.enable_dotenv()
    if ctx.invoked_subcommand is None:
        click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("levels", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--url", default=None, help=f"Seq base URL (default: ${config.URL_ENV_VAR}).")
@click.option("--levels", "levels", default=None, help=f"Comma-separated levels (default: ${config.LEVELS_ENV_VAR}).")
def cli_levels(url: str | None, levels: str | None) -> None:
    """List the levels the configured forwarder accepts."""

    forwarder = _build_forwarder(url=url, levels=levels)
    console = _console()
    for level in sorted(forwarder.accepted_levels(), key=lambda item: item.value):
        console.print(level.severity)


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option("--url", default=None, help=f"Seq base URL (default: ${config.URL_ENV_VAR}).")
@click.option("--api-key", default=None, help=f"Seq API key (default: ${config.API_KEY_ENV_VAR}).")
@click.option("--level", "level_name", type=_LEVEL_CHOICES, default="info", show_default=True)
@click.option("--field", "raw_fields", multiple=True, metavar="KEY=VALUE", help="Structured property; repeatable.")
def cli_send(message: str, url: str | None, api_key: str | None, level_name: str, raw_fields: tuple[str, ...]) -> None:
    """Deliver MESSAGE to Seq as a single event."""

    forwarder = _build_forwarder(url=url, api_key=api_key)
    level = LogLevel.from_name(level_name)
    console = _console()
    if level not in forwarder.accepted_levels():
        console.print(f"[yellow]skipped[/yellow] level {level.severity} is not accepted")
        return

    entry = LogEntry(
        message=message,
        level=level,
        timestamp=datetime.now(timezone.utc),
        fields=dict(_parse_field(raw) for raw in raw_fields),
    )
    try:
        forwarder.deliver(entry)
    except DeliveryError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]delivered[/green] {level.severity} event to {forwarder.endpoint}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI through ``lib_cli_exit_tools`` and restore traceback settings afterwards."""

    previous_traceback = lib_cli_exit_tools.config.traceback
    previous_force_color = lib_cli_exit_tools.config.traceback_force_color
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        lib_cli_exit_tools.config.traceback = previous_traceback
        lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
