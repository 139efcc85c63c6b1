from __future__ import annotations

import json
import threading
from typing import Any

import pytest
import requests

from lib_log_seq.adapters.seq import INGESTION_PATH, SeqForwarder, create_forwarder
from lib_log_seq.domain.entry import LogEntry
from lib_log_seq.domain.errors import (
    DeliveryError,
    EncodingFailed,
    RequestConstructionFailed,
    ResponseReadFailed,
    ServerRejected,
    TransportFailed,
)
from lib_log_seq.domain.levels import ALL_LEVELS, LogLevel
from lib_log_seq.domain.options import with_api_key, with_diagnostic, with_levels, with_session


def test_destination_appends_ingestion_path() -> None:
    forwarder = create_forwarder("http://localhost:5341")
    assert forwarder.endpoint == "http://localhost:5341/api/events/raw"
    assert INGESTION_PATH == "/api/events/raw"


def test_default_forwarder_accepts_all_levels_without_key() -> None:
    forwarder = create_forwarder("http://localhost:5341")
    assert forwarder.accepted_levels() == ALL_LEVELS
    assert forwarder.api_key is None


@pytest.mark.parametrize(
    "levels",
    [
        {LogLevel.ERROR},
        {LogLevel.WARNING, LogLevel.ERROR, LogLevel.FATAL, LogLevel.PANIC},
        set(),
    ],
)
def test_accepted_levels_returns_configured_set_verbatim(levels: set[LogLevel]) -> None:
    forwarder = create_forwarder("http://localhost:5341", with_levels(levels))
    assert forwarder.accepted_levels() == frozenset(levels)


def test_options_combine_levels_and_key() -> None:
    forwarder = SeqForwarder("http://seq", with_levels([LogLevel.WARNING, LogLevel.ERROR]), with_api_key("k1"))
    assert forwarder.accepted_levels() == {LogLevel.WARNING, LogLevel.ERROR}
    assert forwarder.api_key == "k1"


def test_delivery_posts_clef_record(seq_server, sample_entry: LogEntry) -> None:
    forwarder = create_forwarder(seq_server.host)
    forwarder.deliver(sample_entry)

    assert len(seq_server.requests) == 1
    captured = seq_server.requests[0]
    assert captured.path == INGESTION_PATH
    assert captured.headers["Content-Type"] == "application/vnd.serilog.clef"
    assert "X-Seq-ApiKey" not in captured.headers
    payload = json.loads(captured.body)
    assert payload["@mt"] == sample_entry.message
    assert payload["@l"] == "warning"
    assert payload["OrderId"] == 42


def test_delivery_sends_api_key_header(seq_server, sample_entry: LogEntry) -> None:
    forwarder = create_forwarder(seq_server.host, with_api_key("N1ncujiT5pYGD6m4CF0"))
    forwarder.deliver(sample_entry)
    forwarder.deliver(sample_entry)

    assert [captured.headers["X-Seq-ApiKey"] for captured in seq_server.requests] == ["N1ncujiT5pYGD6m4CF0"] * 2


def test_empty_api_key_means_no_header(seq_server, sample_entry: LogEntry) -> None:
    forwarder = create_forwarder(seq_server.host, with_api_key(""))
    forwarder.deliver(sample_entry)
    assert "X-Seq-ApiKey" not in seq_server.requests[0].headers


def test_server_rejection_carries_status_and_body(seq_server, sample_entry: LogEntry) -> None:
    seq_server.respond(500, "internal error")
    forwarder = create_forwarder(seq_server.host)

    with pytest.raises(ServerRejected) as excinfo:
        forwarder.deliver(sample_entry)

    assert excinfo.value.status == 500
    assert excinfo.value.body == "internal error"
    assert "internal error" in str(excinfo.value)


@pytest.mark.parametrize("status", [200, 202, 400, 401, 503])
def test_any_status_other_than_created_is_rejected(seq_server, sample_entry: LogEntry, status: int) -> None:
    seq_server.respond(status, "nope")
    with pytest.raises(ServerRejected) as excinfo:
        create_forwarder(seq_server.host).deliver(sample_entry)
    assert excinfo.value.status == status


def test_unreachable_endpoint_raises_transport_failed(closed_port: int, sample_entry: LogEntry) -> None:
    forwarder = create_forwarder(f"http://127.0.0.1:{closed_port}", with_api_key("k"))

    with pytest.raises(TransportFailed) as excinfo:
        forwarder.deliver(sample_entry)

    assert isinstance(excinfo.value.cause, requests.ConnectionError)
    assert excinfo.value.__cause__ is excinfo.value.cause
    assert forwarder.endpoint == f"http://127.0.0.1:{closed_port}/api/events/raw"
    assert forwarder.api_key == "k"


@pytest.mark.parametrize("host", ["localhost:5341", "not a url", "ftp://seq.example"])
def test_malformed_destination_raises_request_construction_failed(host: str, sample_entry: LogEntry) -> None:
    with pytest.raises(RequestConstructionFailed):
        create_forwarder(host).deliver(sample_entry)


def test_invalid_api_key_header_raises_request_construction_failed(sample_entry: LogEntry) -> None:
    forwarder = create_forwarder("http://127.0.0.1:9", with_api_key("bad\nkey"))
    with pytest.raises(RequestConstructionFailed):
        forwarder.deliver(sample_entry)


class _RecordingSession(requests.Session):
    def __init__(self, response: Any = None) -> None:
        super().__init__()
        self.sent: list[requests.PreparedRequest] = []
        self._response = response

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> Any:
        self.sent.append(request)
        return self._response


class _UnreadableResponse:
    status_code = 502

    def __init__(self) -> None:
        self.closed = False

    @property
    def text(self) -> str:
        raise requests.exceptions.ChunkedEncodingError("connection broken mid-body")

    def __enter__(self) -> "_UnreadableResponse":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.closed = True


def test_unreadable_rejection_body_raises_response_read_failed(sample_entry: LogEntry) -> None:
    response = _UnreadableResponse()
    forwarder = create_forwarder("http://seq.example", with_session(_RecordingSession(response)))

    with pytest.raises(ResponseReadFailed) as excinfo:
        forwarder.deliver(sample_entry)

    assert excinfo.value.status == 502
    assert not isinstance(excinfo.value, ServerRejected)
    assert response.closed


def test_encoding_failure_aborts_before_network(sample_entry: LogEntry) -> None:
    session = _RecordingSession()
    forwarder = create_forwarder("http://seq.example", with_session(session))

    with pytest.raises(EncodingFailed):
        forwarder.deliver(sample_entry.with_fields(handle=object()))

    assert session.sent == []


def test_injected_session_receives_prepared_request(sample_entry: LogEntry) -> None:
    class _Created:
        status_code = 201
        closed = False

        def __enter__(self) -> "_Created":
            return self

        def __exit__(self, *_exc_info: object) -> None:
            self.closed = True

    response = _Created()
    session = _RecordingSession(response)
    create_forwarder("http://seq.example", with_session(session), with_api_key("k")).deliver(sample_entry)

    (prepared,) = session.sent
    assert prepared.method == "POST"
    assert prepared.url == "http://seq.example/api/events/raw"
    assert prepared.headers["X-Seq-ApiKey"] == "k"
    assert response.closed


def test_diagnostic_hook_reports_outcomes(seq_server, sample_entry: LogEntry) -> None:
    events: list[tuple[str, dict[str, Any]]] = []
    forwarder = create_forwarder(seq_server.host, with_diagnostic(lambda name, payload: events.append((name, payload))))

    forwarder.deliver(sample_entry)
    seq_server.respond(400, "bad event")
    with pytest.raises(DeliveryError):
        forwarder.deliver(sample_entry)

    assert [name for name, _ in events] == ["delivered", "delivery_failed"]
    assert events[0][1] == {"endpoint": forwarder.endpoint, "level": "warning"}
    assert events[1][1]["error"] == "server_rejected"
    assert "bad event" in events[1][1]["message"]


def test_concurrent_deliveries_are_independent(seq_server, sample_entry: LogEntry) -> None:
    forwarder = create_forwarder(seq_server.host, with_api_key("k"))
    errors: list[BaseException] = []

    def _worker(index: int) -> None:
        try:
            forwarder.deliver(sample_entry.with_fields(worker=index))
        except DeliveryError as exc:  # pragma: no cover - surfaced through the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=_worker, args=(index,)) for index in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert errors == []
    workers = sorted(json.loads(captured.body)["worker"] for captured in seq_server.requests)
    assert workers == list(range(8))
