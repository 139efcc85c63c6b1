"""Seq forwarder: one CLEF record, one blocking HTTP POST.

Purpose
-------
Deliver log entries to a Seq-compatible raw ingestion endpoint and report
failures back to the host as typed :class:`DeliveryError` exceptions.

Contents
--------
* :data:`INGESTION_PATH` - suffix appended to the configured host.
* :class:`SeqForwarder` - concrete :class:`HookPort` implementation.
* :func:`create_forwarder` - construction helper mirroring the option style.

System Role
-----------
The whole host-facing surface: hosts ask :meth:`SeqForwarder.accepted_levels`
which entries to hand over and call :meth:`SeqForwarder.deliver` once per
entry on their own thread. The forwarder keeps no mutable state after
construction, never retries, and never logs through :mod:`logging` itself.
"""

from __future__ import annotations

from typing import Any

import requests

from lib_log_seq.application.ports.hook import HookPort
from lib_log_seq.domain.entry import LogEntry
from lib_log_seq.domain.errors import (
    DeliveryError,
    RequestConstructionFailed,
    ResponseReadFailed,
    ServerRejected,
    TransportFailed,
)
from lib_log_seq.domain.levels import LogLevel
from lib_log_seq.domain.options import Option, resolve_options

from .clef import CONTENT_TYPE, encode_entry

INGESTION_PATH = "/api/events/raw"
API_KEY_HEADER = "X-Seq-ApiKey"
_STATUS_CREATED = 201


class SeqForwarder(HookPort):
    """Send log entries to Seq via HTTP.

    Examples
    --------
    >>> forwarder = SeqForwarder("http://localhost:5341")
    >>> forwarder.endpoint
    'http://localhost:5341/api/events/raw'
    >>> len(forwarder.accepted_levels())
    7
    """

    def __init__(self, host: str, *options: Option) -> None:
        resolved = resolve_options(options)
        self._endpoint = f"{host}{INGESTION_PATH}"
        self._api_key = resolved.api_key or None
        self._levels = frozenset(resolved.levels)
        self._session = resolved.session if resolved.session is not None else requests.Session()
        self._diagnostic = resolved.diagnostic

    @property
    def endpoint(self) -> str:
        """Full URL events are posted to."""
        return self._endpoint

    @property
    def api_key(self) -> str | None:
        return self._api_key

    def accepted_levels(self) -> frozenset[LogLevel]:
        """Return the levels for which :meth:`deliver` should be called."""

        return self._levels

    def deliver(self, entry: LogEntry) -> None:
        """Encode ``entry`` and POST it, blocking until Seq answers.

        Raises
        ------
        EncodingFailed
            The entry could not be rendered; nothing was sent.
        RequestConstructionFailed
            The endpoint URL or API key header is unusable.
        TransportFailed
            The endpoint could not be reached.
        ServerRejected
            Seq answered with anything other than ``201 Created``.
        ResponseReadFailed
            Seq rejected the event and its response body could not be read.
        """
        try:
            self._deliver(entry)
        except DeliveryError as exc:
            self._emit(
                "delivery_failed",
                {"endpoint": self._endpoint, "level": entry.level.severity, "error": exc.kind, "message": str(exc)},
            )
            raise
        self._emit("delivered", {"endpoint": self._endpoint, "level": entry.level.severity})

    def _deliver(self, entry: LogEntry) -> None:
        body = encode_entry(entry)
        prepared = self._prepare(body)
        response = self._send(prepared)
        with response:
            if response.status_code == _STATUS_CREATED:
                return
            try:
                text = response.text
            except requests.RequestException as exc:
                raise ResponseReadFailed(response.status_code, cause=exc) from exc
            raise ServerRejected(response.status_code, text)

    def _prepare(self, body: bytes) -> requests.PreparedRequest:
        headers = {"Content-Type": CONTENT_TYPE}
        if self._api_key is not None:
            headers[API_KEY_HEADER] = self._api_key
        request = requests.Request("POST", self._endpoint, data=body, headers=headers)
        try:
            return self._session.prepare_request(request)
        except (requests.RequestException, ValueError) as exc:
            raise RequestConstructionFailed(f"cannot build request for {self._endpoint!r}: {exc}") from exc

    def _send(self, prepared: requests.PreparedRequest) -> requests.Response:
        try:
            settings = self._session.merge_environment_settings(prepared.url, {}, True, None, None)
            return self._session.send(prepared, **settings)
        except (requests.exceptions.InvalidSchema, requests.exceptions.InvalidURL) as exc:
            raise RequestConstructionFailed(f"cannot send to {self._endpoint!r}: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportFailed(f"cannot reach {self._endpoint!r}: {exc}", cause=exc) from exc

    def _emit(self, name: str, payload: dict[str, Any]) -> None:
        if self._diagnostic is not None:
            self._diagnostic(name, payload)


def create_forwarder(host: str, *options: Option) -> SeqForwarder:
    """Build a :class:`SeqForwarder` for ``host``, applying ``options`` in order.

    Examples
    --------
    >>> from lib_log_seq.domain.options import with_api_key, with_levels
    >>> fwd = create_forwarder(
    ...     "http://localhost:5341",
    ...     with_levels([LogLevel.WARNING, LogLevel.ERROR]),
    ...     with_api_key("k1"),
    ... )
    >>> sorted(level.name for level in fwd.accepted_levels()), fwd.api_key
    (['ERROR', 'WARNING'], 'k1')
    """

    return SeqForwarder(host, *options)


__all__ = ["API_KEY_HEADER", "INGESTION_PATH", "SeqForwarder", "create_forwarder"]
