"""
=============================================================================
TASKSERVER - In-Memory Task Tracking over Raw Sockets
=============================================================================

A small to-do service that speaks a hand-rolled subset of HTTP/1.1 on
plain TCP sockets, with no web framework in between.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    TASKSERVER ARCHITECTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Listener ──► Worker thread (per connection) ──► TaskStore         │
    │                                                                      │
    │   1. RAW SOCKETS                                                     │
    │      - TCP listener, accept loop                                     │
    │      - One bounded read and one write per connection                 │
    │                                                                      │
    │   2. HTTP SUBSET                                                     │
    │      - Method and path from the request line                         │
    │      - JSON body cut out between the first '{' and the last '}'      │
    │      - Literal status line + Content-Type responses                  │
    │                                                                      │
    │   3. SHARED STATE                                                    │
    │      - One TaskStore, one lock, monotonically assigned ids           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    taskserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m taskserver)
    ├── server.py            # TaskServer: listener + workers + handler
    ├── config.py            # ServerConfig dataclass
    ├── store.py             # Thread-safe in-memory TaskStore
    ├── models.py            # Task, NewTask, UpdateTask
    ├── codec.py             # JSON envelopes in, JSON tasks out
    ├── access_log.py        # Per-request access log lines
    ├── core/                # Low-level networking
    │   ├── socket_server.py # TCP listener and accept loop
    │   └── connection.py    # One-read-one-write connection wrapper
    ├── http/                # The HTTP subset
    │   ├── request.py       # Request line and body scanning
    │   ├── response.py      # Literal response formatting
    │   ├── router.py        # (method, path) dispatch
    │   ├── errors.py        # Request errors with their status codes
    │   └── status_codes.py  # 200, 201, 400, 404
    └── handlers/
        └── tasks.py         # GET/POST/PUT/DELETE /tasks endpoints

=============================================================================
QUICK START
=============================================================================

    from taskserver import TaskServer, ServerConfig

    server = TaskServer(ServerConfig(port=7878))
    server.run()

    $ curl -X POST localhost:7878/tasks -d '{"description": "buy milk"}'
    {"id":1,"description":"buy milk","completed":false}

    $ curl -X PUT localhost:7878/tasks/1 -d '{"completed": true}'
    {"id":1,"description":"buy milk","completed":true}

=============================================================================
"""

__version__ = "1.0.0"

from .server import TaskServer, create_app
from .config import ServerConfig
from .store import TaskStore
from .models import Task, NewTask, UpdateTask

__all__ = [
    "TaskServer",
    "create_app",
    "ServerConfig",
    "TaskStore",
    "Task",
    "NewTask",
    "UpdateTask",
    "__version__",
]
