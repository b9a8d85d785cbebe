"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Renders a (status, body) pair into the exact bytes sent back to the client.

=============================================================================
WIRE FORMAT
=============================================================================

Every response has the same four-line head:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 201 CREATED\r\n             ← status line                 │
    │  Content-Type: text/html\r\n          ← always text/html            │
    │  Content-Length: 14\r\n               ← BYTES of the encoded body   │
    │  \r\n                                 ← blank separator line        │
    │  CREATED: hello                       ← body, no trailing CRLF      │
    └─────────────────────────────────────────────────────────────────────┘

Content-Length counts bytes, not characters:

    body = "héllo"
    len(body)                  # 5 characters
    len(body.encode("utf-8"))  # 6 bytes  ← what goes in the header

Nothing is written after the body. The connection is closed right after
the response, and a stray trailing byte would not be covered by
Content-Length.

=============================================================================
"""

from dataclasses import dataclass

from .status_codes import HTTPStatus, reason_phrase


HTTP_VERSION = "HTTP/1.1"
CONTENT_TYPE = "text/html"


@dataclass
class HTTPResponse:
    """
    A response waiting to be serialized.

    Attributes:
        status: Numeric status code. Any int is accepted; codes outside the
                phrase table render as "UNKNOWN".
        body:   Response text, encoded as UTF-8 on the wire.

    The router compares and returns these, so two responses with the same
    status and body are equal:

        HTTPResponse(404, "NOT FOUND") == not_found()   # True
    """

    status: int = HTTPStatus.OK
    body: str = ""

    @property
    def reason_phrase(self) -> str:
        return reason_phrase(self.status)

    @property
    def status_line(self) -> str:
        """
        The first line of the response, without its CRLF.

        Example: "HTTP/1.1 204 NO CONTENT"
        """
        return f"{HTTP_VERSION} {int(self.status)} {self.reason_phrase}"

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8")

    @property
    def content_length(self) -> int:
        """Length of the encoded body in bytes."""
        return len(self.body_bytes)

    def as_tuple(self) -> tuple[int, str]:
        """(status, body) pair, the router's output shape."""
        return int(self.status), self.body

    def to_bytes(self) -> bytes:
        """
        Serialize to wire bytes ready for socket.sendall().

        Returns:
            Status line, Content-Type, Content-Length, blank line, body.
        """
        body = self.body_bytes
        head = (
            f"{self.status_line}\r\n"
            f"Content-Type: {CONTENT_TYPE}\r\n"
            f"Content-Length: {len(body)}\r\n"
            "\r\n"
        )
        return head.encode("utf-8") + body


def render_response(status: int, body: str) -> bytes:
    """
    Render a (status, body) pair straight to bytes.

    Example:
        render_response(200, "hi")
        # b"HTTP/1.1 200 OK\\r\\nContent-Type: text/html\\r\\n"
        # b"Content-Length: 2\\r\\n\\r\\nhi"
    """
    return HTTPResponse(status=status, body=body).to_bytes()


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================

def ok(body: str = "") -> HTTPResponse:
    """200 OK."""
    return HTTPResponse(HTTPStatus.OK, body)


def created(body: str = "") -> HTTPResponse:
    """201 CREATED."""
    return HTTPResponse(HTTPStatus.CREATED, body)


def no_content(body: str = "") -> HTTPResponse:
    """
    204 NO CONTENT.

    Takes a body anyway: the DELETE route echoes what it removed, and the
    builder frames it with a matching Content-Length like any other status.
    """
    return HTTPResponse(HTTPStatus.NO_CONTENT, body)


def bad_request(body: str = "BAD REQUEST") -> HTTPResponse:
    """400 BAD REQUEST, sent when the request line cannot be parsed."""
    return HTTPResponse(HTTPStatus.BAD_REQUEST, body)


def not_found(body: str = "NOT FOUND") -> HTTPResponse:
    """404 NOT FOUND, for every unmatched method or path."""
    return HTTPResponse(HTTPStatus.NOT_FOUND, body)
