"""Routing — compiled route templates and a registration-ordered route table."""

from velix.routing.pattern import CompiledPattern, compile_pattern, normalize_path
from velix.routing.route import Route, RouteMatch
from velix.routing.router import Router

__all__ = [
    "CompiledPattern",
    "Route",
    "RouteMatch",
    "Router",
    "compile_pattern",
    "normalize_path",
]
