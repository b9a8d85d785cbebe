"""
=============================================================================
ONESHOT
=============================================================================

A minimal HTTP/1.1 server: one connection, one request, one response.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   socket ──► bytes ──► HTTPRequest ──► Router ──► HTTPResponse      │
    │     ▲                                                   │           │
    │     └──────────────────── bytes ◄───────────────────────┘           │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Packages:
    oneshot.http   - parser, router, response builder (no I/O)
    oneshot.core   - listening socket, per-connection threads

Quick start:

    from oneshot import create_server, ServerConfig

    create_server(ServerConfig(port=2442)).run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer
from .echo import EchoServer
from .app import create_router, create_server

__all__ = [
    "HTTPServer",
    "EchoServer",
    "ServerConfig",
    "create_router",
    "create_server",
    "__version__",
]
