"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop. Every accepted connection is
handed to a brand new thread and forgotten.

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    1. socket()    AF_INET + SOCK_STREAM (IPv4 TCP)
    2. setsockopt  SO_REUSEADDR, so a restart does not hit
                   "Address already in use" while old sockets sit in
                   TIME_WAIT
    3. bind()      (host, port)
    4. listen()    backlog = queue of connections not yet accepted
    5. accept()    loop forever; each call returns a NEW socket for one client

=============================================================================
FIRE-AND-FORGET DISPATCH
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   accept loop (one thread)                                          │
    │       │                                                             │
    │       ├── accept() ──► Thread(handler, conn).start() ──► next accept│
    │       ├── accept() ──► Thread(handler, conn).start() ──► next accept│
    │       └── ...                                                       │
    │                                                                     │
    │   Each thread: read ─► parse ─► route ─► render ─► send ─► close    │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

No pool, no queue, no join. One thread per connection, no state shared
between them. A failure inside one connection thread never reaches the
accept loop.

The listening socket uses a one second accept() timeout. It exists only so
the loop can notice shutdown(); it has nothing to do with client sockets,
which stay blocking.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

ConnectionHandler = Callable[[Connection], None]


class SocketServer:
    """
    Low-level TCP server: listen, accept, spawn.

    Usage:
        def handle_connection(conn: Connection):
            with conn:
                data = conn.read_request()
                ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    #: Seconds between shutdown checks while waiting in accept().
    ACCEPT_POLL_INTERVAL = 1.0

    def __init__(self, config: ServerConfig):
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the listening socket is bound, so callers can wait for
        # the real port when config.port is 0
        self._ready_event = threading.Event()
        self._shutdown_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port). Reflects the OS-assigned port once listening."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.settimeout(self.ACCEPT_POLL_INTERVAL)
        return sock

    def _setup_signals(self):
        """
        Catch SIGINT (Ctrl+C) and SIGTERM for a graceful stop.

        signal.signal() only works from the main thread. When the server
        runs in a background thread (tests, embedding) the caller is
        responsible for calling shutdown().
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: ConnectionHandler):
        """
        Bind, listen and run the accept loop.

        BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called in a fresh thread for each accepted
                                connection. It owns the connection and must
                                close it.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        if self._shutdown_event.is_set():
            # shutdown() arrived before the listener was up
            self._running = False
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: ConnectionHandler):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Poll tick, re-check _running
            except OSError as e:
                if not self._running:
                    break  # Socket closed by shutdown
                # Transport failure on one accept; keep serving others
                logger.error(f"Accept error: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )

            worker = threading.Thread(
                target=connection_handler,
                args=(conn,),
                name=f"conn-{conn.id}",
                daemon=True,
            )
            worker.start()

    def shutdown(self):
        """
        Stop the accept loop. Idempotent, callable from any thread.

        A call made before start() makes start() return as soon as the
        socket is bound. Connection threads already running are not
        interrupted.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        # Event first: start() checks it after setting _running
        self._shutdown_event.set()
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._ready_event.clear()
        self._shutdown_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the listening socket is bound.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
