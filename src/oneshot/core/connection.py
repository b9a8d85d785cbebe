"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket for exactly one request/response cycle.

=============================================================================
ONE READ, ONE WRITE, ONE CLOSE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED
     │         │                          │           ▲
     └─────────┴──────────────────────────┴───────────┘
                 any failure jumps straight to CLOSED

There is no keep-alive: after the response is written the socket is closed.
There is also exactly one recv() call. TCP is a byte stream and a request
COULD arrive in several chunks, but this server treats whatever the first
recv() returns as the complete request:

    Client sends:   "POST /something HTTP/1.1\\r\\n...\\r\\n\\r\\nhello"
    recv(8192)  →   the whole thing (typical for small requests)

A request larger than buffer_size, or one the client writes in pieces, is
cut at the first chunk.

=============================================================================
"""

import socket
import logging
import time
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""
    NEW = "new"                # Accepted, nothing read yet
    READING = "reading"        # Waiting on recv()
    PROCESSING = "processing"  # Parsing and routing
    WRITING = "writing"        # Sending the response
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A client connection.

    Use it as a context manager so the socket is closed on every exit path,
    including exceptions:

        with Connection(sock, address) as conn:
            data = conn.read_request()
            if data:
                conn.send_response(render(data))
        # socket closed here

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used to correlate log lines.
        state: Current ConnectionState.
        created_at: Accept timestamp.
        buffer_size: Maximum bytes taken by the single recv().
        timeout: Socket deadline in seconds, None for fully blocking.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 8192
    timeout: Optional[float] = None

    def __post_init__(self):
        # settimeout(None) is the same as setblocking(True)
        self.socket.settimeout(self.timeout)

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read the request with a single recv().

        Returns:
            The bytes received, or None if the client closed the connection
            before sending anything or the read failed.
        """
        self.state = ConnectionState.READING
        try:
            data = self.socket.recv(self.buffer_size)
        except socket.timeout:
            logger.warning(f"[{self.id}] Read timed out")
            return None
        except OSError as e:
            logger.warning(f"[{self.id}] Read failed: {e}")
            return None

        if not data:
            logger.debug(f"[{self.id}] Client closed before sending a request")
            return None

        self.state = ConnectionState.PROCESSING
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the full response.

        sendall() keeps writing until every byte is handed to the kernel;
        plain send() may stop after a partial write.

        Returns:
            True if the data was sent, False if the connection failed.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Safe to call more than once.

        shutdown(SHUT_WR) sends FIN first so the client sees a clean end of
        the response before the descriptor is released.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
