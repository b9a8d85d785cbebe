"""
Unit tests for the router and the default routes.
"""

import pytest

from oneshot.app import create_router
from oneshot.http.request import HTTPRequest, parse_request
from oneshot.http.response import HTTPResponse, ok
from oneshot.http.router import Router


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    return ok(f"{request.method} {request.path}")


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        router = Router()
        router.add_route("GET", "/users", dummy_handler)

        assert router.routes() == [("GET", "/users")]

    def test_decorators(self):
        router = Router()

        @router.get("/a")
        def a(request):
            return ok("a")

        @router.post("/b")
        def b(request):
            return ok("b")

        @router.put("/c")
        def c(request):
            return ok("c")

        @router.delete("/d")
        def d(request):
            return ok("d")

        assert router.dispatch("GET", "/a").body == "a"
        assert router.dispatch("POST", "/b").body == "b"
        assert router.dispatch("PUT", "/c").body == "c"
        assert router.dispatch("DELETE", "/d").body == "d"

    def test_decorator_returns_handler(self):
        router = Router()
        assert router.get("/")(dummy_handler) is dummy_handler

    def test_same_path_different_methods(self):
        router = Router()
        router.add_route("GET", "/x", lambda r: ok("get"))
        router.add_route("POST", "/x", lambda r: ok("post"))

        assert router.dispatch("GET", "/x").body == "get"
        assert router.dispatch("POST", "/x").body == "post"

    def test_reregistering_replaces_handler(self):
        router = Router()
        router.add_route("GET", "/", lambda r: ok("old"))
        router.add_route("GET", "/", lambda r: ok("new"))

        assert router.dispatch("GET", "/").body == "new"
        assert router.routes() == [("GET", "/")]

    @pytest.mark.parametrize("method", ["PATCH", "HEAD", "OPTIONS", "get"])
    def test_unsupported_method_registration(self, method: str):
        with pytest.raises(ValueError):
            Router().add_route(method, "/", dummy_handler)

    def test_path_match_is_exact(self):
        router = Router()
        router.add_route("GET", "/update", dummy_handler)

        assert router.dispatch("GET", "/update").status == 200
        assert router.dispatch("GET", "/update/").status == 404
        assert router.dispatch("GET", "/Update").status == 404
        assert router.dispatch("GET", "/update?x=1").status == 404

    def test_method_match_is_case_sensitive(self):
        router = Router()
        router.add_route("GET", "/", dummy_handler)

        assert router.dispatch("get", "/").as_tuple() == (404, "NOT FOUND")

    def test_handle_passes_request(self):
        router = Router()
        router.add_route("POST", "/echo", lambda r: ok(r.body + r.get_header("X-Tag", "")))
        request = parse_request(b"POST /echo HTTP/1.1\r\nX-Tag: !\r\n\r\nhi")

        assert router.handle(request) == ok("hi!")

    def test_empty_router_returns_404(self):
        assert Router().dispatch("GET", "/").as_tuple() == (404, "NOT FOUND")


class TestDefaultRoutes:
    """The default application's route table."""

    @pytest.fixture
    def router(self) -> Router:
        return create_router()

    def test_get_root(self, router: Router):
        assert router.dispatch("GET", "/", "").as_tuple() == (200, "We accept 200 OK now.")

    def test_post_something(self, router: Router):
        assert router.dispatch("POST", "/something", "hello").as_tuple() == (201, "CREATED: hello")

    def test_put_update(self, router: Router):
        assert router.dispatch("PUT", "/update", "x").as_tuple() == (200, "Another 200 OK for x")

    def test_delete(self, router: Router):
        assert router.dispatch("DELETE", "/delete", "target").as_tuple() == (204, "DELETED target")

    @pytest.mark.parametrize("method, path", [
        ("GET", "/missing"),
        ("POST", "/"),
        ("PUT", "/something"),
        ("DELETE", "/update"),
        ("PATCH", "/"),
        ("HEAD", "/"),
        ("BREW", "/coffee"),
    ])
    def test_unmatched(self, router: Router, method: str, path: str):
        assert router.dispatch(method, path, "body").as_tuple() == (404, "NOT FOUND")

    def test_empty_body_echo(self, router: Router):
        assert router.dispatch("POST", "/something").body == "CREATED: "

    def test_dispatch_is_idempotent(self, router: Router):
        first = router.dispatch("POST", "/something", "same")
        second = router.dispatch("POST", "/something", "same")

        assert first == second
        assert first.to_bytes() == second.to_bytes()

    def test_routes_listing(self, router: Router):
        assert router.routes() == [
            ("GET", "/"),
            ("POST", "/something"),
            ("PUT", "/update"),
            ("DELETE", "/delete"),
        ]
