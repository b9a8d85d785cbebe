"""
=============================================================================
REQUEST ROUTER
=============================================================================

Maps (method, path) to a handler by exact match.

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   Incoming request:  POST /something  body="hello"                  │
    │        │                                                            │
    │        ▼                                                            │
    │   1. Method known?  {GET, POST, PUT, DELETE}                        │
    │        │   no  → 404 NOT FOUND                                      │
    │        ▼                                                            │
    │   2. Exact path in that method's table?                             │
    │        │   no  → 404 NOT FOUND                                      │
    │        ▼                                                            │
    │   3. handler(request) → HTTPResponse(201, "CREATED: hello")         │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Routes are stored as one dict per method:

    {
        "GET":    {"/": index},
        "POST":   {"/something": create},
        "PUT":    {"/update": update},
        "DELETE": {"/delete": delete},
    }

Paths compare as plain strings. "/update/" does not match "/update", there
are no :params or wildcards, and a query string is part of the path.

=============================================================================
PURITY
=============================================================================

The router holds nothing but its route table, which is filled before the
server starts. Dispatching never mutates it, so the same (method, path,
body) always produces the same response, from any thread.

=============================================================================
"""

from typing import Callable, Dict, List, Tuple

from .request import HTTPRequest
from .response import HTTPResponse, not_found


# Handler: takes the parsed request, returns the response to render
Handler = Callable[[HTTPRequest], HTTPResponse]

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")


class Router:
    """
    Exact-match router for the four supported methods.

    Routes can be registered directly or with decorators:

        router = Router()

        @router.get("/")
        def index(request):
            return ok("hello")

        router.add_route("POST", "/something", create)

        router.dispatch("GET", "/", "")        # HTTPResponse(200, "hello")
        router.dispatch("PATCH", "/", "")      # HTTPResponse(404, "NOT FOUND")
    """

    def __init__(self):
        self._routes: Dict[str, Dict[str, Handler]] = {
            method: {} for method in SUPPORTED_METHODS
        }

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, method: str, path: str, handler: Handler) -> None:
        """
        Register a handler for an exact (method, path) pair.

        Registering the same pair again replaces the previous handler.

        Raises:
            ValueError: If the method is not one of SUPPORTED_METHODS.
        """
        if method not in self._routes:
            raise ValueError(
                f"Unsupported method {method!r}, expected one of {SUPPORTED_METHODS}"
            )
        self._routes[method][path] = handler

    def route(self, method: str, path: str) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(method, path, handler)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        return self.route("GET", path)

    def post(self, path: str) -> Callable[[Handler], Handler]:
        return self.route("POST", path)

    def put(self, path: str) -> Callable[[Handler], Handler]:
        return self.route("PUT", path)

    def delete(self, path: str) -> Callable[[Handler], Handler]:
        return self.route("DELETE", path)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def resolve(self, method: str, path: str) -> Handler:
        """
        Find the handler for (method, path).

        Unknown methods and unknown paths both fall through to a handler
        answering 404, so callers never see a "no route" condition.
        """
        return self._routes.get(method, {}).get(path, _not_found_handler)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Route a parsed request and return the handler's response."""
        return self.resolve(request.method, request.path)(request)

    def dispatch(self, method: str, path: str, body: str = "") -> HTTPResponse:
        """
        Route a bare (method, path, body) triple.

        Builds a throwaway HTTPRequest, so handlers see the same interface
        as when called from the server.
        """
        return self.handle(HTTPRequest(method=method, path=path, body=body))

    def routes(self) -> List[Tuple[str, str]]:
        """All registered (method, path) pairs, grouped by method."""
        return [
            (method, path)
            for method, table in self._routes.items()
            for path in table
        ]


def _not_found_handler(request: HTTPRequest) -> HTTPResponse:
    return not_found()
