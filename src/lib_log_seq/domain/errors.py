"""Delivery failure taxonomy.

Every failure the forwarder can report is a :class:`DeliveryError` subclass so
hosts can catch the whole family or a single failure point.
"""

from __future__ import annotations


class DeliveryError(RuntimeError):
    """Base class for failures raised by :meth:`SeqForwarder.deliver`."""

    kind = "delivery_failed"


class EncodingFailed(DeliveryError):
    """The entry could not be rendered as a CLEF record."""

    kind = "encoding_failed"


class RequestConstructionFailed(DeliveryError):
    """The destination URL or a header could not be turned into a request."""

    kind = "request_construction_failed"


class TransportFailed(DeliveryError):
    """The endpoint could not be reached (DNS, connect, timeout, reset)."""

    kind = "transport_failed"

    def __init__(self, message: str, *, cause: BaseException) -> None:
        super().__init__(message)
        self.cause = cause


class ServerRejected(DeliveryError):
    """The endpoint answered with a status other than ``201 Created``."""

    kind = "server_rejected"

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"error creating seq event: HTTP {status}: {body}")
        self.status = status
        self.body = body


class ResponseReadFailed(DeliveryError):
    """A rejection arrived but its body could not be read."""

    kind = "response_read_failed"

    def __init__(self, status: int, *, cause: BaseException) -> None:
        super().__init__(f"error reading seq response body (HTTP {status}): {cause}")
        self.status = status
        self.cause = cause


__all__ = [
    "DeliveryError",
    "EncodingFailed",
    "RequestConstructionFailed",
    "ResponseReadFailed",
    "ServerRejected",
    "TransportFailed",
]
