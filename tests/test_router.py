"""Tests for velix.routing.router — registration-ordered route table."""

import pytest

from velix.errors import ConfigurationError
from velix.routing.route import Route
from velix.routing.router import Router


def _handler(request, response) -> str:
    return "ok"


def _other(request, response) -> str:
    return "other"


class TestRoute:
    def test_create_upper_cases_method(self) -> None:
        route = Route.create("get", "/users", _handler)
        assert route.method == "GET"

    def test_create_compiles_pattern(self) -> None:
        route = Route.create("GET", "/users/{id}", _handler)
        assert route.pattern.param_names == ("id",)

    def test_frozen(self) -> None:
        route = Route.create("GET", "/users", _handler)
        with pytest.raises(AttributeError):
            route.path = "/other"  # type: ignore[misc]

    def test_duplicate_placeholder_rejected_at_creation(self) -> None:
        with pytest.raises(ConfigurationError):
            Route.create("GET", "/x/{id}/{id}", _handler)


class TestRouterMatching:
    def test_static(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/users", _handler))

        match = r.match("GET", "/users")
        assert match is not None
        assert match.route.path == "/users"
        assert match.path_params == {}

    def test_params_extracted(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/users/{id}", _handler))

        match = r.match("GET", "/users/42")
        assert match is not None
        assert match.path_params == {"id": "42"}

    def test_trailing_slash_ignored(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/users", _handler))
        assert r.match("GET", "/users/") is not None

    def test_no_match_returns_none(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/users", _handler))
        assert r.match("GET", "/nope") is None

    def test_empty_router(self) -> None:
        assert Router().match("GET", "/") is None

    def test_first_registered_wins(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/x/{id}", _handler))
        r.add(Route.create("GET", "/x/{id}", _other))

        match = r.match("GET", "/x/1")
        assert match is not None
        assert match.route.handler is _handler

    def test_registration_order_beats_specificity(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/users/{id}", _handler))
        r.add(Route.create("GET", "/users/me", _other))

        match = r.match("GET", "/users/me")
        assert match is not None
        assert match.route.handler is _handler
        assert match.path_params == {"id": "me"}

    def test_method_and_path_matched_jointly(self) -> None:
        r = Router()
        r.add(Route.create("POST", "/users", _handler))
        assert r.match("GET", "/users") is None
        assert r.match("POST", "/users") is not None

    def test_method_case_insensitive(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/users", _handler))
        assert r.match("get", "/users") is not None

    def test_same_path_different_methods(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/items", _handler))
        r.add(Route.create("DELETE", "/items", _other))

        get = r.match("GET", "/items")
        delete = r.match("DELETE", "/items")
        assert get is not None and get.route.handler is _handler
        assert delete is not None and delete.route.handler is _other


class TestRouterLifecycle:
    def test_routes_in_registration_order(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/b", _handler))
        r.add(Route.create("POST", "/a", _handler))
        r.add(Route.create("GET", "/c", _handler))
        assert [route.path for route in r.routes] == ["/b", "/a", "/c"]

    def test_methods(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/a", _handler))
        r.add(Route.create("PATCH", "/a", _handler))
        assert r.methods == frozenset({"GET", "PATCH"})

    def test_add_after_compile_raises(self) -> None:
        r = Router()
        r.compile()
        assert r.compiled is True
        with pytest.raises(ConfigurationError):
            r.add(Route.create("GET", "/late", _handler))

    def test_match_after_compile(self) -> None:
        r = Router()
        r.add(Route.create("GET", "/users/{id}", _handler))
        r.compile()
        match = r.match("GET", "/users/9")
        assert match is not None
        assert match.path_params == {"id": "9"}
