"""
=============================================================================
REQUEST SCANNING
=============================================================================

Turns the bytes of one bounded socket read into an HTTPRequest.

This is NOT an RFC 7230 parser. The task service reads its requests with a
handful of naive string scans, and those scans are part of its observable
behaviour: a stricter parser would answer some malformed requests with 200
where this one answers 400, or the other way round.

=============================================================================
WHAT GETS LOOKED AT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                 ONE READ BUFFER (buffer_size bytes max)             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    PUT /tasks/1 HTTP/1.1\r\n        ◄── first line, split on        │
    │    ─┬─ ────┬───                         whitespace: token 0 is the  │
    │     │      │                            method, token 1 the path    │
    │  method   path                                                       │
    │                                                                      │
    │    Host: localhost:7878\r\n         ◄── headers are never parsed    │
    │    Content-Type: application/json\r\n                               │
    │    \r\n                                                              │
    │    {"completed": true}              ◄── body = first '{' through    │
    │    ▲                 ▲                  last '}' of the WHOLE text, │
    │    first '{'         last '}'           headers included            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Consequences worth knowing:

    - A header value containing '{' or '}' moves the body boundaries.
    - Anything past buffer_size bytes was never read; a long body is cut
      off and will usually fail JSON decoding.
    - The version token, header names and Content-Length are ignored.

=============================================================================
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import MissingJsonBraces, InvalidTaskId


# Largest id a client can address: ids are unsigned 32-bit integers
MAX_TASK_ID = 2 ** 32 - 1

_TASK_ID_PATTERN = re.compile(r"\+?[0-9]+")


@dataclass
class HTTPRequest:
    """
    A scanned request.

    Attributes:
        method: First token of the first line ("" if absent).
        path: Second token of the first line ("" if absent).
        text: The whole decoded read buffer, headers and body included.
        client_address: (ip, port) of the peer, when known.
        path_params: Filled in by the router (e.g. {"id": "42"}).
    """

    method: str = ""
    path: str = ""
    text: str = ""
    client_address: Optional[Tuple[str, int]] = None
    path_params: dict = field(default_factory=dict)

    @property
    def client_ip(self) -> str:
        return self.client_address[0] if self.client_address else "-"

    def json_body(self) -> str:
        """Candidate JSON body; see extract_json_body()."""
        return extract_json_body(self.text)


class RequestParser:
    """
    Scans raw request bytes into HTTPRequest objects.

        raw bytes ──decode (lossy)──► text ──first line──► method, path
                                        │
                                        └── kept whole for body scanning

    Scanning never fails. A request with no usable first line comes back
    with an empty method and path, which no route matches.
    """

    def __init__(self, buffer_size: int = 1024):
        """
        Args:
            buffer_size: Bytes the server reads per request. Anything longer
                         is cut to this size before scanning.
        """
        self.buffer_size = buffer_size

    def parse(self, raw: bytes, client_address: Optional[Tuple[str, int]] = None) -> HTTPRequest:
        text = decode_request(raw[:self.buffer_size])
        method, path = parse_request_line(text)
        return HTTPRequest(
            method=method,
            path=path,
            text=text,
            client_address=client_address,
        )


def decode_request(raw: bytes) -> str:
    """Decode as UTF-8, replacing invalid sequences with U+FFFD."""
    return raw.decode("utf-8", errors="replace")


def parse_request_line(text: str) -> Tuple[str, str]:
    """
    Pull (method, path) out of the first line.

        "GET /tasks HTTP/1.1\\r\\n..."   → ("GET", "/tasks")
        "GET\\r\\n"                      → ("GET", "")
        ""                               → ("", "")
    """
    if not text:
        return "", ""

    first_line = text.split("\n", 1)[0]
    if first_line.endswith("\r"):
        first_line = first_line[:-1]

    tokens = first_line.split()
    method = tokens[0] if len(tokens) > 0 else ""
    path = tokens[1] if len(tokens) > 1 else ""
    return method, path


def extract_json_body(text: str) -> str:
    """
    Cut the candidate JSON body out of the request text.

    Takes everything from the first '{' through the last '}' (inclusive)
    anywhere in the text, then strips trailing NUL padding and surrounding
    whitespace.

    Raises:
        MissingJsonBraces: No '{', no '}', or the last '}' comes before
                           the first '{'.
    """
    start = text.find("{")
    if start == -1:
        raise MissingJsonBraces("opening")

    end = text.rfind("}")
    if end < start:
        raise MissingJsonBraces("closing")

    body = text[start:end + 1]
    return body.rstrip("\0").strip()


def parse_task_id(raw_id: str) -> int:
    """
    Parse the id segment of /tasks/<id>.

    Accepts ASCII digits with an optional leading '+', in the range
    0..2**32-1. No whitespace, no sign other than '+', no underscores.

    Raises:
        InvalidTaskId: Anything else, including the empty string.
    """
    if not _TASK_ID_PATTERN.fullmatch(raw_id):
        raise InvalidTaskId(raw_id)

    task_id = int(raw_id)
    if task_id > MAX_TASK_ID:
        raise InvalidTaskId(raw_id)
    return task_id
