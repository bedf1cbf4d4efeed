"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration management for the task server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m taskserver --port 3000                          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── TASKSERVER_PORT=3000 python -m taskserver                 │
    │                                                                      │
    │   3. Defaults (this file)                                           │
    │      └── 127.0.0.1:7878, 1024-byte reads, no read timeout          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE READ BUFFER IS A PROTOCOL LIMIT
=============================================================================

Each request is read with ONE recv() of at most buffer_size bytes. The
server never loops to read more, so buffer_size is the hard upper bound
on request line + headers + body. A larger request is truncated, and its
JSON body will usually fail to decode (400).

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the task server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, read_timeout

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (default)
    - "0.0.0.0" - All network interfaces (containers)
    """

    port: int = 7878
    """
    The port number to listen on. 0 lets the OS pick a free port; the
    actual port is available from TaskServer.address once listening.
    """

    backlog: int = 128
    """
    Maximum number of queued connections.
    When the accept queue is full, new connections are refused.
    """

    buffer_size: int = 1024
    """
    Size of the single read per request, in bytes.
    Requests longer than this are truncated, not reassembled.
    """

    read_timeout: Optional[float] = None
    """
    Seconds a worker waits for the request bytes.
    None = block until the client sends or disconnects. A client that
    connects and never sends keeps its worker thread alive forever.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG also logs every store mutation and rejected request.
    """

    log_format: str = "text"
    """
    Access log format: 'text' (Apache-like) or 'json' (one object per line).
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "TaskServer/1.0"
    """Name shown in the startup log line."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        TASKSERVER_HOST          Server host (default: 127.0.0.1)
        TASKSERVER_PORT          Server port (default: 7878)
        TASKSERVER_BUFFER_SIZE   Read buffer in bytes (default: 1024)
        TASKSERVER_READ_TIMEOUT  Read timeout in seconds (default: none)
        TASKSERVER_LOG_LEVEL     Logging level (default: INFO)
        TASKSERVER_LOG_FORMAT    Access log format (default: text)

        =====================================================================
        """
        read_timeout = os.getenv("TASKSERVER_READ_TIMEOUT")
        return cls(
            host=os.getenv("TASKSERVER_HOST", "127.0.0.1"),
            port=int(os.getenv("TASKSERVER_PORT", "7878")),
            buffer_size=int(os.getenv("TASKSERVER_BUFFER_SIZE", "1024")),
            read_timeout=float(read_timeout) if read_timeout else None,
            log_level=os.getenv("TASKSERVER_LOG_LEVEL", "INFO"),
            log_format=os.getenv("TASKSERVER_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad value fails immediately rather
        than on the first request.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 16:
            raise ValueError("buffer_size must be >= 16")

        if self.read_timeout is not None and self.read_timeout <= 0:
            raise ValueError("read_timeout must be > 0")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
