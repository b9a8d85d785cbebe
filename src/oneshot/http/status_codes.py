"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The closed set of status codes this server can produce, with the reason
phrases written on the status line.

=============================================================================
THE STATUS LINE
=============================================================================

    HTTP/1.1 201 CREATED\r\n
    ───┬──── ─┬─ ───┬───
       │      │     │
    Version  Code  Reason phrase (from _STATUS_PHRASES)

The phrases are upper case on purpose: clients match on the numeric code,
and RFC 7230 treats the phrase as informational only.

    ┌────────┬──────────────┬──────────────────────────────────────────┐
    │  Code  │  Phrase      │  Produced by                             │
    ├────────┼──────────────┼──────────────────────────────────────────┤
    │  200   │  OK          │  GET /  and  PUT /update                 │
    │  201   │  CREATED     │  POST /something                         │
    │  204   │  NO CONTENT  │  DELETE /delete                          │
    │  400   │  BAD REQUEST │  malformed request line fallback         │
    │  404   │  NOT FOUND   │  any unmatched method or path            │
    └────────┴──────────────┴──────────────────────────────────────────┘

Anything outside the table renders with the phrase "UNKNOWN" instead of
failing the request.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    Status codes known to the response builder.

    Extends IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NO_CONTENT.phrase
        'NO CONTENT'
    """

    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    BAD_REQUEST = 400
    NOT_FOUND = 404

    @property
    def phrase(self) -> str:
        """Reason phrase written after the code on the status line."""
        return _STATUS_PHRASES[self]

#: Phrase used for any status code missing from the table.
UNKNOWN_PHRASE = "UNKNOWN"

_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "CREATED",
    HTTPStatus.NO_CONTENT: "NO CONTENT",
    HTTPStatus.BAD_REQUEST: "BAD REQUEST",
    HTTPStatus.NOT_FOUND: "NOT FOUND",
}


def reason_phrase(status: int) -> str:
    """
    Look up the reason phrase for any integer status code.

    Args:
        status: Numeric status code (an HTTPStatus member or a plain int).

    Returns:
        The phrase from the table, or UNKNOWN_PHRASE for unmapped codes.

    Example:
        reason_phrase(204)  # "NO CONTENT"
        reason_phrase(418)  # "UNKNOWN"
    """
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return UNKNOWN_PHRASE
