"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the transport layer to the HTTP core.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   SocketServer accept()                                             │
    │        │  new thread                                                │
    │        ▼                                                            │
    │   RECEIVE   conn.read_request()        one recv()                   │
    │        ▼                                                            │
    │   PARSE     RequestParser.parse()      bad line → 400, then close   │
    │        ▼                                                            │
    │   ROUTE     Router.handle()            no match → 404               │
    │        ▼                                                            │
    │   RENDER    HTTPResponse.to_bytes()                                 │
    │        ▼                                                            │
    │   SEND      conn.send_response()                                    │
    │        ▼                                                            │
    │   CLOSE     always, via the Connection context manager              │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Strictly linear: no stage loops back and nothing survives the connection.

=============================================================================
FAILURE HANDLING
=============================================================================

    ┌──────────────────────┬──────────────────────────────────────────────┐
    │  Failure             │  Outcome                                     │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │  Unknown method/path │  normal 404 response                         │
    │  Bad request line    │  400 BAD REQUEST, connection closed          │
    │  Client sent nothing │  connection closed, nothing written          │
    │  recv/send error     │  logged, connection closed                   │
    │  Handler exception   │  logged with traceback, connection closed    │
    └──────────────────────┴──────────────────────────────────────────────┘

Every row only affects its own connection. The accept loop keeps running.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection
from .http import (
    HTTPParseError,
    HTTPResponse,
    RequestParser,
    Router,
    bad_request,
)


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure the root logger and the package log level.

    Unknown level names fall back to INFO. basicConfig() is a no-op when
    the root logger already has handlers, so an embedding application
    keeps its own setup.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("oneshot").setLevel(level)


class HTTPServer:
    """
    Single-request-per-connection HTTP/1.1 server.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(port=8080))

        @server.get("/")
        def index(request):
            return ok("hello")

        @server.post("/echo")
        def echo(request):
            return created(request.body)

        server.run()   # Blocks until Ctrl+C

    =========================================================================
    COMPONENTS
    =========================================================================

    - ServerConfig:  host, port, buffer size, log level
    - SocketServer:  listening socket and thread-per-connection dispatch
    - RequestParser: raw bytes → HTTPRequest
    - Router:        (method, path) → handler
    - logger:        where lifecycle events go, module logger by default

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        router: Optional[Router] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            config: Server configuration. Defaults to ServerConfig().
            router: Pre-populated router. A new empty one if omitted.
            logger: Log sink for lifecycle events. Defaults to this
                    module's logger.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._router = router or Router()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self):
        """Bound (host, port). Use after wait_until_ready() when port is 0."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # ROUTE REGISTRATION (Decorator Style)
    # =========================================================================

    def get(self, path: str):
        """Register a GET route."""
        return self._router.get(path)

    def post(self, path: str):
        """Register a POST route."""
        return self._router.post(path)

    def put(self, path: str):
        """Register a PUT route."""
        return self._router.put(path)

    def delete(self, path: str):
        """Register a DELETE route."""
        return self._router.delete(path)

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start serving. BLOCKS until shutdown() or SIGINT/SIGTERM.

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port
            self.config.validate()

        setup_logging(self.config.log_level)
        self._logger.info(
            f"Starting {self.config.server_name} on {self.config.host}:{self.config.port}"
        )
        for method, path in self._router.routes():
            self._logger.debug(f"Route {method:6} {path}")

        try:
            self._socket_server.start(self._process_connection)
        except KeyboardInterrupt:
            self._logger.info("Received keyboard interrupt")
        finally:
            self._logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. In-flight connections finish on their own."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle_bytes(self, data: bytes, client_address=("", 0)) -> bytes:
        """
        Run the parse → route → render pipeline on one raw request.

        This is everything the server does between recv() and sendall(),
        without a socket, which makes it the easiest seam to test.

        Args:
            data: Raw request bytes.
            client_address: Peer address, used only for logging.

        Returns:
            Raw response bytes. A malformed request line yields a
            400 BAD REQUEST response.
        """
        return self._respond(data, client_address).to_bytes()

    def _respond(self, data: bytes, client_address) -> HTTPResponse:
        try:
            request = self._parser.parse(data, client_address)
        except HTTPParseError as e:
            self._logger.warning(f"Malformed request from {client_address[0]}: {e}")
            return bad_request()

        self._logger.debug(f"Parsed request: {request!r}")
        response = self._router.handle(request)
        self._logger.info(
            f'"{request.method} {request.path}" {int(response.status)} '
            f"{response.content_length}"
        )
        return response

    def _process_connection(self, conn: Connection):
        """
        Handle one connection from read to close. Runs in its own thread.
        """
        with conn:
            self._logger.info(f"[{conn.id}] Processing incoming client request...")

            data = conn.read_request()
            if data is None:
                return

            try:
                response_bytes = self.handle_bytes(data, conn.address)
            except Exception as e:
                # A broken handler must only cost its own connection
                self._logger.exception(f"[{conn.id}] Handler error: {e}")
                return

            if conn.send_response(response_bytes):
                self._logger.info(f"[{conn.id}] Sent response ({len(response_bytes)} bytes)")
