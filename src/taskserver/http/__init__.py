"""
=============================================================================
HTTP SUBSET
=============================================================================

The slice of HTTP/1.1 the task service understands: one request line,
a brace-scanned JSON body, and literal responses.

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST SCANNING (request.py)                                       │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   b"PUT /tasks/1 HTTP/1.1\r\n...\r\n\r\n{\"completed\":true}"│
    │ Output:  HTTPRequest(method="PUT", path="/tasks/1", text=...)       │
    │                                                                      │
    │   • Lossy UTF-8 decoding                                            │
    │   • Method and path from the first line                             │
    │   • First '{' to last '}' body extraction                           │
    │   • Task id validation                                              │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSES (response.py)                                             │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   created('{"id":1,"description":"test","completed":false}') │
    │ Output:  b"HTTP/1.1 201 Created\r\nContent-Type: ...\r\n\r\n{...}"  │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ ROUTER (router.py)                                                  │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   PUT /tasks/123                                             │
    │ Output:  calls update_task(request) with path_params={"id": "123"} │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ STATUS CODES (status_codes.py)                                      │
    │ ─────────────────────────────────────────────────────────────────── │
    │ 200, 201, 400 and 404 with their reason phrases                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestParser,
    decode_request,
    parse_request_line,
    extract_json_body,
    parse_task_id,
    MAX_TASK_ID,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,             # 200 OK
    created,        # 201 Created
    bad_request,    # 400 Bad Request
    not_found,      # 404 Not Found
    error_response,
)
from .errors import (
    RequestError,
    MissingJsonBraces,
    JsonParseFailure,
    InvalidTaskId,
    TaskNotFound,
)
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    # Request scanning
    "HTTPRequest",
    "RequestParser",
    "decode_request",
    "parse_request_line",
    "extract_json_body",
    "parse_task_id",
    "MAX_TASK_ID",

    # Responses
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "bad_request",
    "not_found",
    "error_response",

    # Request errors
    "RequestError",
    "MissingJsonBraces",
    "JsonParseFailure",
    "InvalidTaskId",
    "TaskNotFound",

    # Routing
    "Router",
    "Route",
    "RouteMatch",

    # Status codes
    "HTTPStatus",
]
