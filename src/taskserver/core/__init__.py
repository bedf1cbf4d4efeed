"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The low-level networking plumbing of the task server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates the TCP listening socket                                 │
    │  • Binds to IP:PORT and runs the accept() loop                      │
    │  • Handles shutdown via signals (SIGTERM, SIGINT) or shutdown()     │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ One Connection per accepted socket
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • One bounded read, one write, then close                          │
    │  • Tracks AWAITING_READ → TERMINAL                                  │
    └─────────────────────────────────────────────────────────────────────┘

Each Connection is processed on its own thread; see taskserver.server.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # TCP listener - accepts connections
    "Connection",       # Client socket wrapper - one read, one write
    "ConnectionState",  # AWAITING_READ / TERMINAL
]
