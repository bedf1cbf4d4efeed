"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) pairs to handler functions.

Supports:
- Static paths: /tasks
- Wildcard tails: /tasks/*id  (captures everything after "/tasks/")
- Method-based routing: GET, POST, PUT, DELETE

=============================================================================
MATCHING RULES
=============================================================================

    ┌──────────────────────┬───────────────┬──────────────────────────────┐
    │ Request              │ Route         │ Result                       │
    ├──────────────────────┼───────────────┼──────────────────────────────┤
    │ GET /tasks           │ GET /tasks    │ match                        │
    │ GET /tasks/          │ GET /tasks    │ no match (no normalisation)  │
    │ get /tasks           │ GET /tasks    │ no match (case-sensitive)    │
    │ PUT /tasks/42        │ PUT /tasks/*id│ match, id="42"               │
    │ PUT /tasks/4/2       │ PUT /tasks/*id│ match, id="4/2"              │
    │ PUT /tasks/          │ PUT /tasks/*id│ match, id=""                 │
    └──────────────────────┴───────────────┴──────────────────────────────┘

Paths are compared exactly as they arrived. A wildcard tail may be empty
and may contain slashes; deciding whether it is a valid id is the
handler's job, not the router's.

Anything that matches no route gets 404 "Not Found". There is no 405:
a known path with an unsupported method is just another unknown route.

=============================================================================
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .request import HTTPRequest
from .response import HTTPResponse, not_found


Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A registered route.

        Route(
            path="/tasks/*id",       # URL pattern
            method="PUT",            # Exact, case-sensitive method
            handler=update_task,     # Handler function
            _pattern=<compiled>,     # Compiled regex for matching
        )
    """

    path: str
    method: str
    handler: Handler
    _pattern: Optional[re.Pattern] = field(default=None, repr=False)


@dataclass
class RouteMatch:
    """
    Result of a successful route match.

        Pattern: /tasks/*id
        Path:    /tasks/123
        Result:  RouteMatch(route=<Route>, params={"id": "123"})
    """

    route: Route
    params: Dict[str, str]


class Router:
    """
    Ordered list of routes; first registered, first matched.

        router = Router()

        @router.get("/tasks")
        def list_tasks(request):
            ...

        @router.put("/tasks/*id")
        def update_task(request):
            task_id = request.path_params["id"]
            ...
    """

    def __init__(self):
        self._routes: List[Route] = []

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    def add_route(self, path: str, handler: Handler, method: str) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern, optionally ending in a *name wildcard.
            handler: Takes the request, returns the response.
            method: HTTP method, matched exactly.
        """
        route = Route(
            path=path,
            method=method,
            handler=handler,
            _pattern=self._compile_pattern(path),
        )
        self._routes.append(route)
        return route

    def _compile_pattern(self, path: str) -> re.Pattern:
        """
        Compile a path pattern into a regex.

            "/tasks"       → /tasks
            "/tasks/*id"   → /tasks/(?P<id>.*)

        A *name segment must be last and matches the rest of the path,
        including an empty rest. The pattern is used with fullmatch().
        """
        regex_parts = []

        segments = path.split("/")
        for i, segment in enumerate(segments):
            if i > 0:
                regex_parts.append("/")

            if segment.startswith("*"):
                param_name = segment[1:] or "wildcard"
                regex_parts.append(f"(?P<{param_name}>.*)")
                break
            regex_parts.append(re.escape(segment))

        return re.compile("".join(regex_parts), re.DOTALL)

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path exactly.

        Returns:
            RouteMatch if found, None otherwise.
        """
        for route in self._routes:
            if route.method != method:
                continue

            found = route._pattern.fullmatch(path)
            if found:
                return RouteMatch(route=route, params=found.groupdict())

        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler, or answer 404.

        Path parameters are injected into request.path_params.
        """
        match = self.match(request.method, request.path)
        if match is None:
            return not_found("Not Found")

        request.path_params = match.params
        return match.route.handler(request)

    # =========================================================================
    # DECORATOR-STYLE ROUTE REGISTRATION
    # =========================================================================

    def route(self, path: str, method: str) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method=method)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, "GET")

    def post(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, "POST")

    def put(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, "PUT")

    def delete(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, "DELETE")
