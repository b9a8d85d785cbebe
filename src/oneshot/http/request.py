"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one HTTP/1.1 request into an HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │  POST /something HTTP/1.1\r\n      ← request line (3 tokens)        │
    │  ──┬─ ─────┬──── ────┬───                                           │
    │    │       │         │                                              │
    │  Method   Path    Version                                           │
    │                                                                     │
    │  Host: localhost\r\n               ← header lines ("Key: Value")    │
    │  Content-Type: text/plain\r\n                                       │
    │                                                                     │
    │  \r\n                              ← first empty line = boundary    │
    │                                                                     │
    │  hello                             ← body (everything after it)     │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PARSING ALGORITHM
=============================================================================

    raw bytes
        │
        ▼
    1. Decode as UTF-8 and split on CRLF into lines
        │
        ▼
    2. lines[0] split on " " → exactly [method, path, version]
        │                      otherwise → MalformedRequestLine
        ▼
    3. Partition lines[1:] at the FIRST empty line
        │      before → header lines
        │      after  → body lines
        ▼
    4. parse_header() on every header line, last duplicate wins
        │
        ▼
    5. "\r\n".join(body lines) → body string

The whole request is expected in the payload handed to the parser. There is
no Content-Length driven reading here: the body is simply whatever followed
the blank line.

=============================================================================
MALFORMED HEADERS
=============================================================================

A header line without ": " is not dropped. It is kept under the sentinel key
"invalid_header" so the text is still visible when debugging. Since keys are
unique, several malformed lines overwrite each other and only the last one
survives.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


#: Line terminator used by the HTTP/1.1 text protocol.
CRLF = "\r\n"

#: Key under which header lines without a ": " separator are stored.
INVALID_HEADER_KEY = "invalid_header"

HEADER_SEPARATOR = ": "


class HTTPParseError(Exception):
    """
    Raised when a request cannot be parsed.

    Carries the HTTP status the server should answer with, so the
    connection driver can render a fallback response without knowing
    which parse step failed.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class MalformedRequestLine(HTTPParseError):
    """The request line did not split into method, path and version."""

    def __init__(self, line: str):
        super().__init__(f"Invalid request line: {line!r}")
        self.line = line


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Lives for exactly one request/response cycle and is never shared
    between connections.

    Attributes:
        method:         Request method token, e.g. "GET". Case-sensitive.
        path:           Request target exactly as sent. No query string
                        splitting and no URL decoding.
        version:        Version token, e.g. "HTTP/1.1". Not validated.
        headers:        Header name → value, names lowercased.
        body:           Text after the first blank line, "" if none.
        client_address: (ip, port) of the peer, for logging.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    client_address: Tuple[str, int] = ("", 0)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Case-insensitive header lookup.

        Header names are stored lowercased at parse time, so lowercasing the
        requested name is enough:

            request.get_header("Content-Type")
            request.get_header("CONTENT-TYPE")   # same value
        """
        return self.headers.get(name.lower(), default)

def parse_header(line: str) -> Tuple[str, str]:
    """
    Split one header line into a (name, value) pair.

    Splits on the first ": " only, so values may themselves contain ": ".

    Args:
        line: A header line without its CRLF terminator.

    Returns:
        (lowercased name, value), or (INVALID_HEADER_KEY, line) when the
        line has no ": " separator.

    Example:
        parse_header("Content-Type: text/html")  # ("content-type", "text/html")
        parse_header("garbage")                  # ("invalid_header", "garbage")
    """
    parts = line.split(HEADER_SEPARATOR, 1)
    if len(parts) == 2:
        name, value = parts
        return name.lower(), value
    return INVALID_HEADER_KEY, line


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    Stateless: one instance can be shared by every connection thread.

    Usage:
        parser = RequestParser()
        request = parser.parse(b"GET / HTTP/1.1\\r\\nHost: x\\r\\n\\r\\n")
        request.method   # "GET"
    """

    def __init__(self, encoding: str = "utf-8"):
        """
        Args:
            encoding: Codec used to decode the payload. Undecodable bytes
                      are replaced rather than rejected.
        """
        self.encoding = encoding

    def parse(
        self,
        data: bytes,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse one complete request payload.

        Args:
            data: Everything received for this request.
            client_address: Peer (ip, port), copied onto the request.

        Returns:
            The parsed HTTPRequest.

        Raises:
            MalformedRequestLine: If the first line is not exactly
                "METHOD PATH VERSION".
        """
        text = data.decode(self.encoding, errors="replace")
        request_line, *rest = text.split(CRLF)

        method, path, version = self._parse_request_line(request_line)
        header_lines, body_lines = self._split_sections(rest)

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=self._parse_headers(header_lines),
            body=CRLF.join(body_lines),
            client_address=client_address,
        )

    def _parse_request_line(self, line: str) -> Tuple[str, str, str]:
        # Single spaces only: "GET  / HTTP/1.1" has four tokens and fails.
        tokens = line.split(" ")
        if len(tokens) != 3:
            raise MalformedRequestLine(line)
        method, path, version = tokens
        return method, path, version

    def _split_sections(self, lines: List[str]) -> Tuple[List[str], List[str]]:
        """
        Partition lines at the first empty line.

        The empty line itself belongs to neither side. Without an empty line
        every remaining line is a header line and the body is empty.
        """
        try:
            boundary = lines.index("")
        except ValueError:
            return lines, []
        return lines[:boundary], lines[boundary + 1:]

    def _parse_headers(self, lines: List[str]) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        for line in lines:
            name, value = parse_header(line)
            headers[name] = value  # Last duplicate wins
        return headers


def parse_request(
    data: bytes,
    client_address: Tuple[str, int] = ("", 0),
) -> HTTPRequest:
    """
    Convenience function: parse one request with a default RequestParser.

    Raises:
        MalformedRequestLine: On a bad request line.
    """
    return RequestParser().parse(data, client_address)
