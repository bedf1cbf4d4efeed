"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for exactly one request/response
exchange.

=============================================================================
ONE READ, ONE WRITE
=============================================================================

TCP is a byte stream: a request may arrive split across several
segments, and a general HTTP server has to buffer until it sees a whole
message. This server does not. It performs a single recv() of at most
buffer_size bytes and treats whatever came back as the complete request.

    Client sends:                      Server sees (one recv):
        PUT /tasks/1 HTTP/1.1\r\n          everything that had arrived
        ...\r\n                            when recv() returned, capped
        \r\n                               at buffer_size bytes
        {"completed": true}

Bytes arriving after that read are never looked at. A request that the
client dribbles out slowly, or that exceeds the buffer, is handled on the
strength of its first chunk alone.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    ┌────────────────┐   read_once()    ┌────────────┐   close()
    │ AWAITING_READ  │ ───────────────► │  TERMINAL  │ ──────────► socket
    └────────────────┘  (or any error)  └────────────┘             released

There is no partial-request state and no keep-alive loop back to
AWAITING_READ.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)

# Upper bounds on discarding unread client bytes before close()
DRAIN_TIMEOUT = 0.5
DRAIN_MAX_BYTES = 64 * 1024


class ConnectionState(Enum):
    """Connection lifecycle states."""
    AWAITING_READ = "awaiting_read"   # Accepted, request not read yet
    TERMINAL = "terminal"             # Read done: write the response, then close


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        bytes_read: Size of the request read, once read.
    """

    # Required parameters
    socket: socket.socket
    address: tuple

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.AWAITING_READ
    created_at: float = field(default_factory=time.time)
    bytes_read: int = 0

    # Configuration (passed from ServerConfig)
    buffer_size: int = 1024
    read_timeout: Optional[float] = None

    _closed: bool = field(default=False, repr=False)

    def __post_init__(self):
        # Accepted sockets inherit nothing useful from the listener's
        # accept-polling timeout; set ours explicitly. None = blocking.
        self.socket.settimeout(self.read_timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def client_port(self) -> int:
        """Get the client port."""
        return self.address[1]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_once(self) -> bytes:
        """
        Read the request with a single recv() call.

        Returns:
            Up to buffer_size bytes. Empty bytes if the client closed the
            connection without sending anything.

        Raises:
            TimeoutError: read_timeout is set and nothing arrived in time.
            OSError: The connection failed (e.g. reset by peer).
        """
        try:
            data = self.socket.recv(self.buffer_size)
        except socket.timeout:
            raise TimeoutError(f"No request within {self.read_timeout}s") from None
        finally:
            self.state = ConnectionState.TERMINAL

        self.bytes_read = len(data)
        logger.debug(f"[{self.id}] Read {len(data)} bytes from {self.client_ip}:{self.client_port}")
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the response.

        Uses sendall() so the whole response is written even when the
        kernel send buffer only takes part of it at a time.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.TERMINAL

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            # Client disconnected
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR): send FIN, the client sees end-of-response.
        2. Drain briefly: unread request bytes left in the kernel buffer
           would make close() send RST and could destroy the response in
           flight. The drain stops after DRAIN_TIMEOUT seconds in total or
           DRAIN_MAX_BYTES bytes, whichever comes first.
        3. close(): release the file descriptor.
        """
        if self._closed:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self._drain()
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self._closed = True
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def _drain(self):
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0

        while drained < DRAIN_MAX_BYTES:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            self.socket.settimeout(remaining)
            chunk = self.socket.recv(self.buffer_size)
            if not chunk:
                break
            drained += len(chunk)

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
            with conn:
                data = conn.read_once()
                conn.send_response(response)
            # Connection closed here, even if handling failed
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
