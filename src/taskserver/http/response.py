"""
=============================================================================
HTTP RESPONSE FORMATTING
=============================================================================

Builds the literal HTTP/1.1 responses the task service writes back.

=============================================================================
RESPONSE ANATOMY
=============================================================================

Every response is assembled by hand, byte for byte. There are exactly two
shapes on the wire:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  DATA RESPONSE (200 / 201)                                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 201 Created\r\n                 ← status line           │
    │    Content-Type: application/json\r\n       ← only header           │
    │    \r\n                                     ← separator             │
    │    {"id":1,"description":"test","completed":false}                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │  ERROR RESPONSE (400 / 404)                                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 404 Not Found\r\n               ← status line           │
    │    \r\n                                     ← separator, no headers │
    │    Task not found                           ← plain text            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no Content-Length, Date or Server header. The server closes the
connection after every response, and the close is what tells the client
the body has ended.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict

from .status_codes import HTTPStatus


JSON_CONTENT_TYPE = "application/json"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Use ResponseBuilder or the helper functions at the bottom of this
    module rather than building one by hand.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (convenient in logs and tests)."""
        return self.body.decode("utf-8", errors="replace")

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for sending over the socket.

            HTTP/1.1 200 OK\r\n              ← Status line
            Content-Type: application/json\r\n   ← Only if set
            \r\n                             ← Empty line (separator)
            [...]                            ← Body bytes

        Nothing is added automatically: the headers written are exactly
        the headers set.
        """
        lines = [self.status_line]

        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.CREATED)
            .json('{"id":1,"description":"test","completed":false}')
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the response status code."""
        self._status = status
        return self

    def json(self, document: str) -> "ResponseBuilder":
        """
        Set an already-serialized JSON document as the body.

        Serialization of task records lives in taskserver.codec; the
        response layer only frames the text.
        """
        self._headers["Content-Type"] = JSON_CONTENT_TYPE
        self._body = document.encode("utf-8")
        return self

    def text(self, message: str) -> "ResponseBuilder":
        """Set a plain-text body. No Content-Type is sent with it."""
        self._body = message.encode("utf-8")
        return self

    def build(self) -> HTTPResponse:
        """Build the final HTTPResponse."""
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One helper per response the task service can produce. Data responses take
# serialized JSON text, error responses take the plain-text message.
#
# =============================================================================

def ok(document: str) -> HTTPResponse:
    """Create a 200 OK response carrying a JSON document."""
    return ResponseBuilder().status(HTTPStatus.OK).json(document).build()


def created(document: str) -> HTTPResponse:
    """Create a 201 Created response carrying the new task."""
    return ResponseBuilder().status(HTTPStatus.CREATED).json(document).build()


def bad_request(message: str) -> HTTPResponse:
    """Create a 400 Bad Request response with a plain-text message."""
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).text(message).build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    """Create a 404 Not Found response with a plain-text message."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).text(message).build()


def error_response(status: HTTPStatus, message: str) -> HTTPResponse:
    """Create a plain-text error response for an arbitrary status."""
    return ResponseBuilder().status(status).text(message).build()
