"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All knobs of the server in one typed, validated dataclass.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   CLI arguments   python -m oneshot 8080 --log-level DEBUG          │
    │        │          (highest priority, applied by __main__)           │
    │        ▼                                                            │
    │   Environment     ONESHOT_PORT=8080 python -m oneshot               │
    │        │          (ServerConfig.from_env)                           │
    │        ▼                                                            │
    │   Defaults        the field defaults below                          │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

The port is the only value most deployments ever set. Everything else has
a default matching the baseline behavior: blocking reads with no deadline,
one read per request.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_PORT = 2442


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP and echo servers.

    Development:
        ServerConfig(host="127.0.0.1", port=8080, log_level="DEBUG")

    Tests:
        ServerConfig(host="127.0.0.1", port=0)   # OS picks a free port
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind. "0.0.0.0" listens on every IPv4 interface."""

    port: int = DEFAULT_PORT
    """TCP port to listen on. 0 asks the OS for a free one."""

    backlog: int = 128
    """Accepted-but-not-yet-handled connections the OS will queue."""

    buffer_size: int = 8192
    """
    Size of the single recv() per connection.

    A request larger than this is truncated: the server reads exactly once.
    """

    timeout: Optional[float] = None
    """
    Read/write deadline on accepted sockets, in seconds.

    None = block until the client sends or closes. A silent client then
    holds its connection thread for as long as it stays connected.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG also logs every parsed request."""

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "oneshot/1.0"
    """Shown in startup logs."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        ONESHOT_HOST          Bind address       (default: 0.0.0.0)
        ONESHOT_PORT          Listen port        (default: 2442)
        ONESHOT_BACKLOG       Listen backlog     (default: 128)
        ONESHOT_BUFFER_SIZE   recv() size        (default: 8192)
        ONESHOT_TIMEOUT       Socket deadline    (default: unset = none)
        ONESHOT_LOG_LEVEL     Logging level      (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("ONESHOT_TIMEOUT")
        return cls(
            host=os.getenv("ONESHOT_HOST", "0.0.0.0"),
            port=int(os.getenv("ONESHOT_PORT", str(DEFAULT_PORT))),
            backlog=int(os.getenv("ONESHOT_BACKLOG", "128")),
            buffer_size=int(os.getenv("ONESHOT_BUFFER_SIZE", "8192")),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("ONESHOT_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by the servers at construction time, so a bad port fails
        at startup and not on the first connection.

        Raises:
            ValueError: Describing the first invalid field.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
