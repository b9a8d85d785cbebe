"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

The part of the server that knows nothing about sockets:

    raw bytes ──► RequestParser ──► HTTPRequest
                                        │
                                        ▼
                                     Router
                                        │
                                        ▼
    raw bytes ◄── HTTPResponse.to_bytes() ◄── HTTPResponse

Everything here is a pure function of its input, which is why it can be
tested without opening a single connection.

Key points:
- Lines end with CRLF (\\r\\n)
- Headers and body are separated by the first empty line
- Header names are case-insensitive and stored lowercased
- Content-Length is the byte length of the encoded body

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    MalformedRequestLine,
    parse_header,
    parse_request,
)
from .response import (
    HTTPResponse,
    render_response,
    ok,             # 200 OK
    created,        # 201 CREATED
    no_content,     # 204 NO CONTENT
    bad_request,    # 400 BAD REQUEST
    not_found,      # 404 NOT FOUND
)
from .router import Router, Handler
from .status_codes import HTTPStatus, reason_phrase

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "MalformedRequestLine",
    "parse_header",
    "parse_request",
    # Response building
    "HTTPResponse",
    "render_response",
    "ok",
    "created",
    "no_content",
    "bad_request",
    "not_found",
    # Routing
    "Router",
    "Handler",
    # Status codes
    "HTTPStatus",
    "reason_phrase",
]
