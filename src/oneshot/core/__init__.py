"""
=============================================================================
TRANSPORT LAYER
=============================================================================

Socket plumbing around the HTTP core:

    SocketServer  - listening socket, accept loop, thread per connection
    Connection    - one client socket: a single read, a single write, close

Nothing in here knows what an HTTP request looks like. The HTTP and echo
servers plug their per-connection logic in as a callback.

=============================================================================
"""

from .socket_server import SocketServer, ConnectionHandler
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",       # Accept loop, spawns a thread per connection
    "ConnectionHandler",  # Callback type run in each connection thread
    "Connection",         # Wrapper for one client socket
    "ConnectionState",    # Lifecycle of a single request/response cycle
]
