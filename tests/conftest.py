from __future__ import annotations

import socket
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Iterator

import pytest

from lib_log_seq.domain.entry import LogEntry
from lib_log_seq.domain.levels import LogLevel


_PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")


@pytest.fixture(autouse=True)
def _no_proxies(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep requests to the local test server away from any configured proxy."""

    for name in _PROXY_VARS:
        monkeypatch.delenv(name, raising=False)


@dataclass
class _Captured:
    path: str
    headers: dict[str, str]
    body: bytes


@dataclass
class _Reply:
    status: int = 201
    body: bytes = b""


@dataclass
class SeqServer:
    """Minimal stand-in for Seq's raw ingestion endpoint."""

    host: str
    requests: list[_Captured] = field(default_factory=list)
    reply: _Reply = field(default_factory=_Reply)

    def respond(self, status: int, body: str = "") -> None:
        self.reply = _Reply(status=status, body=body.encode("utf-8"))


def _make_handler(server: SeqServer) -> type[BaseHTTPRequestHandler]:
    class _Handler(BaseHTTPRequestHandler):
        def do_POST(self) -> None:  # noqa: N802 - http.server naming
            length = int(self.headers.get("Content-Length", "0"))
            body = self.rfile.read(length)
            server.requests.append(_Captured(self.path, dict(self.headers.items()), body))
            reply = server.reply
            self.send_response(reply.status)
            self.send_header("Content-Length", str(len(reply.body)))
            self.end_headers()
            self.wfile.write(reply.body)

        def log_message(self, *_args: object) -> None:
            return None

    return _Handler


@pytest.fixture
def seq_server() -> Iterator[SeqServer]:
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), BaseHTTPRequestHandler)
    state = SeqServer(host=f"http://127.0.0.1:{httpd.server_address[1]}")
    httpd.RequestHandlerClass = _make_handler(state)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield state
    finally:
        httpd.shutdown()
        httpd.server_close()
        thread.join(timeout=1)


@pytest.fixture
def closed_port() -> int:
    """Return a local port with nothing listening on it."""

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def sample_entry() -> LogEntry:
    return LogEntry(
        message="Order {OrderId} shipped",
        level=LogLevel.WARNING,
        timestamp=datetime(2025, 9, 23, 12, 30, 15, 250000, tzinfo=timezone.utc),
        fields={"OrderId": 42, "customer": {"name": "ada", "tags": ["vip"]}},
    )
