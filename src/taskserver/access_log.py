"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log line per request/response exchange, on its own logger so it can
be routed or silenced independently of the server's diagnostic logs:

    logging.getLogger("taskserver.access").setLevel(logging.WARNING)

=============================================================================
FORMATS
=============================================================================

text (Apache-like, human readable):

    127.0.0.1 - - [17/Oct/2026:10:00:00 +0000] "POST /tasks" 201 47 0.31ms [a1b2c3d4]

json (one object per line, for log aggregators):

    {"connection_id": "a1b2c3d4", "method": "POST", "path": "/tasks", ...}

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass

from .http.request import HTTPRequest
from .http.response import HTTPResponse


logger = logging.getLogger("taskserver.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one exchange.

    connection_id:  Short id of the connection (matches server debug logs)
    method, path:   As scanned from the request line (may be empty)
    client_ip:      Peer address
    status_code:    Response status
    content_length: Response body size in bytes
    duration_ms:    Time from request read to response written
    timestamp:      When the exchange completed
    """

    connection_id: str
    method: str
    path: str
    client_ip: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "connection_id": self.connection_id,
            "method": self.method,
            "path": self.path,
            "client_ip": self.client_ip,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms [{self.connection_id}]'
        )


class AccessLogger:
    """
    Emits RequestLog entries in the configured format.

    Usage:
        access_log = AccessLogger(log_format="json")
        access_log.log(conn.id, request, response, duration_ms)
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        self.log_format = log_format
        self.log_level = log_level

    def build(
        self,
        connection_id: str,
        request: HTTPRequest,
        response: HTTPResponse,
        duration_ms: float,
    ) -> RequestLog:
        return RequestLog(
            connection_id=connection_id,
            method=request.method or "-",
            path=request.path or "-",
            client_ip=request.client_ip,
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

    def log(
        self,
        connection_id: str,
        request: HTTPRequest,
        response: HTTPResponse,
        duration_ms: float,
    ) -> RequestLog:
        entry = self.build(connection_id, request, response, duration_ms)

        if not logger.isEnabledFor(self.log_level):
            return entry

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())
        return entry
