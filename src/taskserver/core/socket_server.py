"""
=============================================================================
TCP LISTENER
=============================================================================

Binds the task server's port, accepts connections and passes each one to
a callback. Nothing in here knows about HTTP or tasks.

=============================================================================
WHAT HAPPENS IN start()
=============================================================================

    bind ──► listen ──► ready ──► accept loop ──► close listener
     │                             │
     │ OSError propagates          │ every accepted socket becomes a
     │ (port in use, bad host)     │ Connection carrying buffer_size and
     ▼                             ▼ read_timeout, then goes to the callback
   caller                        callback (must return quickly)

The listener sets two options before binding:

    SO_REUSEADDR   restart on the same port while old sockets sit in TIME_WAIT
    TCP_NODELAY    responses are one small write; send them without delay

=============================================================================
STOPPING
=============================================================================

accept() polls with a one second timeout, so a stop request is noticed
within about a second. A stop can come from:

    shutdown()          any thread
    SIGINT / SIGTERM    only when start() runs on the main thread

Workers already handed a connection are not waited for.

=============================================================================
"""

import signal
import socket
import logging
import threading
from contextlib import contextmanager
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

ConnectionCallback = Callable[[Connection], None]

# Seconds accept() blocks before re-checking for a stop request
ACCEPT_POLL_INTERVAL = 1.0


class SocketServer:
    """
    Accept loop for the task server.

        listener = SocketServer(config)
        listener.start(on_connection)   # blocks until shutdown()

    on_connection runs on the accepting thread; the server spawns a
    worker there and returns immediately.
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        self._listener: Optional[socket.socket] = None
        self._bound_address: Optional[Tuple[str, int]] = None

        self._ready = threading.Event()
        self._stop_requested = threading.Event()

    @property
    def address(self) -> Tuple[str, int]:
        """
        Address actually bound once listening, else the configured one.

        With port 0 this is where the OS-assigned port shows up.
        """
        return self._bound_address or (self.config.host, self.config.port)

    def start(self, on_connection: ConnectionCallback):
        """
        Listen and accept until shutdown() (or a signal) stops the loop.

        Raises:
            OSError: The configured address could not be bound.
        """
        self._stop_requested.clear()
        self._listener = self._bind()

        try:
            with self._signal_handlers():
                self._ready.set()
                host, port = self.address
                logger.info(f"Listening on {host}:{port}")
                self._serve(on_connection)
        finally:
            self._close_listener()

    def shutdown(self):
        """Ask the accept loop to stop. Idempotent, safe from any thread."""
        if not self._stop_requested.is_set():
            logger.info("Stop requested, closing listener")
        self._stop_requested.set()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """True once the port is bound and listening, False on timeout."""
        return self._ready.wait(timeout)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _bind(self) -> socket.socket:
        host, port = self.config.host, self.config.port

        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        listener.settimeout(ACCEPT_POLL_INTERVAL)

        try:
            listener.bind((host, port))
            listener.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Cannot listen on {host}:{port}: {e}")
            listener.close()
            raise

        self._bound_address = listener.getsockname()[:2]
        return listener

    def _serve(self, on_connection: ConnectionCallback):
        while not self._stop_requested.is_set():
            try:
                client, peer = self._listener.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._stop_requested.is_set():
                    logger.error(f"accept() failed, stopping: {e}")
                return

            conn = Connection(
                socket=client,
                address=peer,
                buffer_size=self.config.buffer_size,
                read_timeout=self.config.read_timeout,
            )
            logger.debug(f"[{conn.id}] Accepted {peer[0]}:{peer[1]}")
            on_connection(conn)

    @contextmanager
    def _signal_handlers(self):
        """
        Route SIGINT and SIGTERM to shutdown() while the loop runs.

        signal.signal() only works on the main thread; an embedded server
        (tests, a background thread) is stopped with shutdown() instead.
        """
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        def on_signal(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}")
            self.shutdown()

        previous = {
            sig: signal.signal(sig, on_signal)
            for sig in (signal.SIGINT, signal.SIGTERM)
        }
        try:
            yield
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

    def _close_listener(self):
        self._ready.clear()
        if self._listener is not None:
            self._listener.close()
            self._listener = None
        logger.info("Listener closed")
