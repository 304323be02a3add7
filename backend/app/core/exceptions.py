"""Error taxonomy for failures talking to the upstream employee directory.

Every failure the core raises is an ``UpstreamError`` tagged with an
``ErrorKind``. The kind decides the HTTP status and the ``error`` label the
caller sees; the upstream body (when there is one) travels as the message.
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    OTHER_CLIENT = "other_client"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    OTHER_SERVER = "other_server"
    UNREACHABLE = "unreachable"
    MALFORMED_RESPONSE = "malformed_response"
    UNEXPECTED = "unexpected"


# kind -> (status returned to the caller, error label)
_FIXED_MAPPING: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.BAD_REQUEST: (400, "Bad Request"),
    ErrorKind.FORBIDDEN: (403, "Forbidden"),
    ErrorKind.NOT_FOUND: (404, "Not Found"),
    ErrorKind.INTERNAL_SERVER_ERROR: (500, "Internal Server Error"),
    ErrorKind.SERVICE_UNAVAILABLE: (503, "Service Unavailable"),
    ErrorKind.UNREACHABLE: (503, "Service is unavailable"),
    ErrorKind.MALFORMED_RESPONSE: (500, "An error occurred while processing your request"),
    ErrorKind.UNEXPECTED: (500, "An unexpected error occurred"),
}

_STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.BAD_REQUEST,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    500: ErrorKind.INTERNAL_SERVER_ERROR,
    503: ErrorKind.SERVICE_UNAVAILABLE,
}


def classify_status(status: int) -> ErrorKind:
    """Map an upstream HTTP error status onto an ``ErrorKind``."""
    if status in _STATUS_KINDS:
        return _STATUS_KINDS[status]
    if 400 <= status < 500:
        return ErrorKind.OTHER_CLIENT
    if 500 <= status < 600:
        return ErrorKind.OTHER_SERVER
    return ErrorKind.UNEXPECTED


def _status_text(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return f"HTTP {status}"


class UpstreamError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        status: int | None = None,
        reason: str | None = None,
        body: str | None = None,
    ) -> None:
        self.kind = kind
        self.status = status
        self.reason = reason
        self.body = body
        self.message = body if body else message
        super().__init__(self.message or kind.value)

    @classmethod
    def from_status(cls, status: int, reason: str | None, body: str) -> UpstreamError:
        return cls(
            classify_status(status),
            f"Upstream responded with HTTP {status}",
            status=status,
            reason=reason or _status_text(status),
            body=body,
        )

    @property
    def http_status(self) -> int:
        if self.kind in _FIXED_MAPPING:
            return _FIXED_MAPPING[self.kind][0]
        # Other 4xx / 5xx are passed through as-is
        return self.status or 500

    @property
    def error(self) -> str:
        if self.kind in _FIXED_MAPPING:
            return _FIXED_MAPPING[self.kind][1]
        return self.reason or _status_text(self.http_status)
