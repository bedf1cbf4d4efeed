"""
Request-level errors raised while handling a single connection.

Each error carries the HTTP status it should be answered with, so the
handler can turn any of them into a response with one except clause:

    RequestError              (base)
    ├── MissingJsonBraces     400  no '{' or no '}' in the request text
    ├── JsonParseFailure      400  body is not a valid envelope
    ├── InvalidTaskId         400  '/tasks/<id>' suffix is not a u32
    └── TaskNotFound          404  store has no task with that id

A missing or short request line is NOT an error: it simply matches no
route and falls through to 404.
"""

from typing import Optional

from .status_codes import HTTPStatus


class RequestError(Exception):
    """
    Raised when a request cannot be served.

    The message is sent verbatim as the plain-text response body.
    """

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[HTTPStatus] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code

    @property
    def message(self) -> str:
        return self.args[0]


class MissingJsonBraces(RequestError):
    """No candidate JSON object could be cut out of the request text."""

    def __init__(self, missing: str, message: Optional[str] = None):
        # missing is "opening" or "closing"
        self.missing = missing
        super().__init__(message or f"Invalid body format (missing {missing} bracket)")


class JsonParseFailure(RequestError):
    """The candidate body did not decode into the expected envelope."""


class InvalidTaskId(RequestError):
    """The id segment of the path is not a non-negative 32-bit integer."""

    def __init__(self, raw_id: str):
        self.raw_id = raw_id
        super().__init__("Invalid task ID")


class TaskNotFound(RequestError):
    """The store holds no task with the requested id."""

    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__("Task not found")
