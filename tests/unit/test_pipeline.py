"""
Unit tests for the parse → route → render pipeline, without sockets.
"""

import logging

import pytest

from oneshot import HTTPServer, ServerConfig, create_server
from oneshot.http.request import parse_request
from oneshot.app import create_router


@pytest.fixture
def server():
    return create_server(ServerConfig(host="127.0.0.1", port=0))


def content_length(raw: bytes) -> int:
    head, _ = raw.split(b"\r\n\r\n", 1)
    for line in head.split(b"\r\n"):
        if line.startswith(b"Content-Length: "):
            return int(line.split(b": ", 1)[1])
    raise AssertionError("no Content-Length header")


class TestScenarios:
    """End-to-end request/response pairs for the default routes."""

    def test_get_root(self, server, sample_get_request: bytes):
        raw = server.handle_bytes(sample_get_request)

        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
        assert raw.endswith(b"\r\n\r\nWe accept 200 OK now.")

    def test_post_something(self, server, sample_post_request: bytes):
        raw = server.handle_bytes(sample_post_request)

        assert raw.startswith(b"HTTP/1.1 201 CREATED\r\n")
        assert raw.endswith(b"\r\n\r\nCREATED: hello")

    def test_delete(self, server):
        raw = server.handle_bytes(b"DELETE /delete HTTP/1.1\r\nHost: x\r\n\r\ntarget")

        assert raw.startswith(b"HTTP/1.1 204 NO CONTENT\r\n")
        assert raw.endswith(b"\r\n\r\nDELETED target")

    def test_missing_path(self, server):
        raw = server.handle_bytes(b"GET /missing HTTP/1.1\r\nHost: x\r\n\r\n")

        assert raw.startswith(b"HTTP/1.1 404 NOT FOUND\r\n")
        assert raw.endswith(b"\r\n\r\nNOT FOUND")

    def test_unknown_method(self, server):
        raw = server.handle_bytes(b"PATCH / HTTP/1.1\r\nHost: x\r\n\r\n")

        assert raw.startswith(b"HTTP/1.1 404 NOT FOUND\r\n")

    def test_malformed_request_line(self, server):
        raw = server.handle_bytes(b"GARBAGE\r\n\r\n")

        assert raw == (
            b"HTTP/1.1 400 BAD REQUEST\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 11\r\n"
            b"\r\n"
            b"BAD REQUEST"
        )


class TestContentLength:
    """Content-Length always equals the byte length of what follows."""

    @pytest.mark.parametrize("raw_request", [
        b"GET / HTTP/1.1\r\nHost: x\r\n\r\n",
        b"POST /something HTTP/1.1\r\n\r\n",
        "POST /something HTTP/1.1\r\n\r\nünïcödé ☃".encode("utf-8"),
        b"PUT /update HTTP/1.1\r\nHost: x\r\n\r\na\r\nb\r\n\r\nc",
        b"DELETE /delete HTTP/1.1\r\n\r\n\xfe\xff",
        b"GET /nope HTTP/1.1\r\n\r\n",
    ])
    def test_matches_body_bytes(self, server, raw_request: bytes):
        raw = server.handle_bytes(raw_request)
        _, body = raw.split(b"\r\n\r\n", 1)

        assert content_length(raw) == len(body)

    def test_same_as_router_output(self):
        router = create_router()
        request = parse_request("POST /something HTTP/1.1\r\n\r\n日本".encode("utf-8"))
        response = router.handle(request)

        assert response.body == "CREATED: 日本"
        assert content_length(response.to_bytes()) == len("CREATED: 日本".encode("utf-8"))


class TestLogging:
    """The server logs through the injected logger."""

    def test_injected_logger_receives_events(self, caplog):
        logger = logging.getLogger("tests.pipeline")
        server = HTTPServer(ServerConfig(port=0), router=create_router(), logger=logger)

        with caplog.at_level(logging.INFO, logger="tests.pipeline"):
            server.handle_bytes(b"GET / HTTP/1.1\r\n\r\n")

        assert any('"GET /" 200' in record.getMessage() for record in caplog.records)

    def test_malformed_request_is_warned(self, caplog):
        server = create_server(ServerConfig(port=0))

        with caplog.at_level(logging.WARNING, logger="oneshot"):
            server.handle_bytes(b"bad\r\n\r\n", ("10.0.0.1", 1234))

        assert any(
            record.levelno == logging.WARNING and "10.0.0.1" in record.getMessage()
            for record in caplog.records
        )
