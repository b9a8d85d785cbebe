"""
The default application: one route per method.

    GET    /           → 200  "We accept 200 OK now."
    POST   /something  → 201  "CREATED: <body>"
    PUT    /update     → 200  "Another 200 OK for <body>"
    DELETE /delete     → 204  "DELETED <body>"
    anything else      → 404  "NOT FOUND"
"""

from typing import Optional

from .config import ServerConfig
from .http import HTTPRequest, HTTPResponse, Router, created, no_content, ok
from .server import HTTPServer


def index(request: HTTPRequest) -> HTTPResponse:
    return ok("We accept 200 OK now.")


def create_something(request: HTTPRequest) -> HTTPResponse:
    return created(f"CREATED: {request.body}")


def update(request: HTTPRequest) -> HTTPResponse:
    return ok(f"Another 200 OK for {request.body}")


def delete(request: HTTPRequest) -> HTTPResponse:
    return no_content(f"DELETED {request.body}")


def create_router() -> Router:
    """Build a router with the default routes registered."""
    router = Router()
    router.add_route("GET", "/", index)
    router.add_route("POST", "/something", create_something)
    router.add_route("PUT", "/update", update)
    router.add_route("DELETE", "/delete", delete)
    return router


def create_server(config: Optional[ServerConfig] = None) -> HTTPServer:
    """An HTTPServer serving the default routes."""
    return HTTPServer(config, router=create_router())
