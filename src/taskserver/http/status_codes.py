"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The task service speaks a deliberately tiny slice of HTTP/1.1, so only the
four status codes it can actually emit are defined here.

=============================================================================
STATUS CODES IN USE
=============================================================================

    ┌───────┬──────────────┬──────────────────────────────────────────────┐
    │ Code  │ Phrase       │ When                                         │
    ├───────┼──────────────┼──────────────────────────────────────────────┤
    │ 200   │ OK           │ GET /tasks, successful PUT, successful DELETE│
    │ 201   │ Created      │ successful POST /tasks                       │
    │ 400   │ Bad Request  │ bad task id, missing braces, invalid JSON    │
    │ 404   │ Not Found    │ unknown route, unknown task id               │
    └───────┴──────────────┴──────────────────────────────────────────────┘

There is no 405 (a known path with the wrong method is simply 404), no
500 (a crashing worker drops its connection instead), and no redirects.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.CREATED.phrase
        'Created'
    """

    OK = 200            # List, update, delete
    CREATED = 201       # Task created
    BAD_REQUEST = 400   # Malformed id or body
    NOT_FOUND = 404     # Unknown route or task

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 201 Created
                     ─── ───────
                      │     │
                      │     └── Reason phrase
                      └──────── Status code
        """
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
}
