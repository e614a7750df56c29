"""Route and RouteMatch frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass

from velix._internal.types import Handler
from velix.routing.pattern import CompiledPattern, compile_pattern


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup; immutable once registered.
    """

    method: str
    path: str
    handler: Handler
    pattern: CompiledPattern

    @classmethod
    def create(cls, method: str, path: str, handler: Handler) -> Route:
        """Build a Route, compiling *path* and upper-casing *method*."""
        return cls(
            method=method.upper(),
            path=path,
            handler=handler,
            pattern=compile_pattern(path),
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
