"""Route table with registration-ordered matching.

Routes are registered during setup and frozen when the app compiles.
"""

import logging

from velix.errors import ConfigurationError
from velix.routing.route import Route, RouteMatch

logger = logging.getLogger("velix.routing")


class Router:
    """Route table keyed by HTTP method.

    Within a method, routes are tried in registration order and the
    first pattern that matches wins. Method and path are matched
    jointly: a path registered only for ``POST`` is simply no match for
    ``GET``.

    Usage::

        router = Router()
        router.add(Route.create("GET", "/users/{id}", handler))
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_order", "_table")

    def __init__(self) -> None:
        self._table: dict[str, list[Route]] = {}
        self._order: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = f"Cannot add route {route.method} {route.path!r} after compilation."
            raise ConfigurationError(msg)

        self._table.setdefault(route.method, []).append(route)
        self._order.append(route)
        logger.debug("Registered %s %s", route.method, route.path)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._order)

    @property
    def methods(self) -> frozenset[str]:
        """HTTP methods with at least one registered route."""
        return frozenset(self._table)

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Match a request method and path against registered routes.

        Returns a ``RouteMatch`` for the first matching route, or
        ``None`` when nothing matches. No match is not an error.
        """
        for route in self._table.get(method.upper(), ()):
            params = route.pattern.match(path)
            if params is not None:
                return RouteMatch(route=route, path_params=params)
        return None
