"""
=============================================================================
TASK SERVER
=============================================================================

Wires the listener, the per-connection workers, the handler and the store
together.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer (main thread)                                         │
    │       accept() ──► Connection ──► _handle_connection()               │
    │                                        │                             │
    │                                        │ new daemon thread           │
    │                                        ▼                             │
    │   Worker thread: _process_connection(conn)                          │
    │       1. conn.read_once()        one recv(), ≤ buffer_size bytes    │
    │       2. parser.parse()          method, path, raw text             │
    │       3. handler.handle()        route → TaskStore → HTTPResponse   │
    │       4. conn.send_response()    literal HTTP/1.1 bytes             │
    │       5. close                   always, via `with conn:`           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THREAD PER CONNECTION
=============================================================================

Every accepted connection gets its own thread, started immediately. There
is no pool and no connection limit: under load the number of live threads
is the number of open connections. Workers are independent and
short-lived; the only thing they share is the TaskStore, which does its
own locking.

With read_timeout left at None, a client that connects and sends nothing
pins its worker thread until it disconnects. Set read_timeout to bound
that.

=============================================================================
WHEN THINGS GO WRONG
=============================================================================

    Bad request (id, braces, JSON)   → 400/404 answered by TaskHandler
    Read/write failure or timeout    → this connection is dropped, logged
    Unexpected exception in handler  → logged with traceback, connection
                                       dropped without a response

None of these affect other connections or the server itself.

=============================================================================
"""

import logging
import threading
import time
from typing import Optional, Tuple

from .access_log import AccessLogger
from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import TaskHandler
from .http import RequestParser, HTTPRequest, HTTPResponse
from .store import TaskStore


logger = logging.getLogger(__name__)


class TaskServer:
    """
    In-memory task-tracking server over a minimal HTTP subset.

    Usage:
        server = TaskServer(ServerConfig(port=7878))
        server.run()    # Blocks until Ctrl+C / SIGTERM / shutdown()

    Embedding (e.g. in tests):
        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()
        server.wait_until_ready(5.0)
        host, port = server.address
        ...
        server.shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None, store: Optional[TaskStore] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.
            store: Task store to serve. A fresh empty store if not provided.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self.store = store if store is not None else TaskStore()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(buffer_size=self.config.buffer_size)
        self._handler = TaskHandler(self.store)
        self._access_log = AccessLogger(log_format=self.config.log_format)

        self._running = False

    @property
    def address(self) -> Tuple[str, int]:
        """The (host, port) the server listens on."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking).

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        self._running = True

        logger.info(
            f"Starting {self.config.server_name} on {self.config.host}:{self.config.port} "
            f"(read buffer {self.config.buffer_size} bytes)"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info(f"Server stopped with {len(self.store)} tasks in memory")

    def shutdown(self):
        """Stop accepting connections. Safe to call from any thread."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening (or timeout)."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("taskserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Spawn a worker thread for a new connection.

        Called by SocketServer on the accept thread, so it only starts the
        thread and returns.
        """
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection (runs in worker thread).
        """
        with conn:
            try:
                raw_request = conn.read_once()
            except TimeoutError as e:
                logger.warning(f"[{conn.id}] {e}, dropping connection")
                return
            except OSError as e:
                logger.warning(f"[{conn.id}] Read failed: {e}")
                return

            start_time = time.perf_counter()

            try:
                request = self._parser.parse(raw_request, conn.address)
                response = self.handle_request(request)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error: {e}")
                return

            if not conn.send_response(response.to_bytes()):
                return

            duration_ms = (time.perf_counter() - start_time) * 1000
            self._access_log.log(conn.id, request, response, duration_ms)

    def handle_request(self, request: HTTPRequest) -> HTTPResponse:
        """Dispatch one scanned request. Usable without any sockets."""
        return self._handler.handle(request)

    def handle_raw(self, raw: bytes, client_address: Optional[Tuple[str, int]] = None) -> HTTPResponse:
        """Scan and dispatch raw request bytes as if read from a socket."""
        return self.handle_request(self._parser.parse(raw, client_address))


def create_app(config: Optional[ServerConfig] = None) -> TaskServer:
    """
    Create a task server with an empty store.

        app = create_app(ServerConfig(port=3000))
        app.run()
    """
    return TaskServer(config)
