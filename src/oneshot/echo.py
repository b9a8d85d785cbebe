"""
=============================================================================
ECHO SERVER
=============================================================================

A raw TCP echo server on the same socket plumbing as the HTTP server.
Useful for checking that a port is reachable before blaming HTTP.

    $ python -m oneshot --echo 2442
    $ nc localhost 2442
    hello            ← typed
    hello            ← echoed back

Unlike the HTTP server, a connection stays open: every chunk received is
written straight back until the client closes its side.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection
from .server import setup_logging


logger = logging.getLogger(__name__)


class EchoServer:
    """
    Echo every received chunk back to its sender.

    Usage:
        server = EchoServer(ServerConfig(port=2442))
        server.run()   # Blocks until Ctrl+C
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()
        self._socket_server = SocketServer(self.config)

    @property
    def address(self):
        return self._socket_server.address

    def run(self):
        """Start echoing. BLOCKS until shutdown() or SIGINT/SIGTERM."""
        setup_logging(self.config.log_level)
        logger.info(f"Echo server starting on {self.config.host}:{self.config.port}")
        self._socket_server.start(self._echo)

    def shutdown(self):
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _echo(self, conn: Connection):
        with conn:
            echoed = 0
            while True:
                data = conn.read_request()
                if data is None:
                    break
                if not conn.send_response(data):
                    break
                echoed += len(data)
            logger.debug(f"[{conn.id}] Echoed {echoed} bytes")
