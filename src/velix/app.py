"""Velix application class.

Mutable during setup (route registration, middleware).
Frozen at runtime when ``dispatch()`` or ``__call__()`` is first invoked.
"""

import logging
import threading
from collections.abc import Callable

from velix._internal.asgi import Receive, Scope, Send
from velix._internal.types import Emitter, Handler
from velix.config import AppConfig
from velix.errors import ConfigurationError
from velix.http.request import IncomingRequest
from velix.middleware.builtin import CORSMiddleware
from velix.middleware.protocol import Middleware
from velix.routing.route import Route
from velix.routing.router import Router
from velix.server.handler import DispatchResult, handle_request

type Decorator = Callable[[Handler], Handler]


class App:
    """The velix application.

    Holds the route table and the middleware list as fields; there is no
    module-level registry. Build one at process start, register routes
    and middleware, then hand it to a transport::

        app = App()

        @app.get("/users/{id}")
        def show_user(request, response):
            return {"id": request.param("id")}

        result = app.dispatch(IncomingRequest("GET", "/users/42"))

    Thread safety:
        The setup phase is single-threaded (registration at import time).
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread compiles the app, even when several worker threads
        dispatch their first request concurrently.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_router",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router = Router()
        self._middleware_list: list[Middleware] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state — set during _freeze()
        self._middleware: tuple[Middleware, ...] = ()

    # -- Route registration --

    def add_route(self, method: str, path: str, handler: Handler) -> Handler:
        """Register *handler* for *method* and the path template *path*.

        Path templates use ``{name}`` placeholders. Routes for the same
        method are matched in registration order; the first match wins.
        """
        self._check_not_frozen()
        self._router.add(Route.create(method, path, handler))
        return handler

    def route(self, path: str, *, methods: list[str] | None = None) -> Decorator:
        """Register a route handler via decorator.

        Args:
            path: URL path template. Use ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.add_route(method, path, func)
            return func

        return decorator

    def _verb(self, method: str, path: str, handler: Handler | None) -> Handler | Decorator:
        if handler is not None:
            return self.add_route(method, path, handler)
        return self.route(path, methods=[method])

    def get(self, path: str, handler: Handler | None = None) -> Handler | Decorator:
        """Register a GET route, directly or as a decorator."""
        return self._verb("GET", path, handler)

    def post(self, path: str, handler: Handler | None = None) -> Handler | Decorator:
        """Register a POST route, directly or as a decorator."""
        return self._verb("POST", path, handler)

    def put(self, path: str, handler: Handler | None = None) -> Handler | Decorator:
        """Register a PUT route, directly or as a decorator."""
        return self._verb("PUT", path, handler)

    def patch(self, path: str, handler: Handler | None = None) -> Handler | Decorator:
        """Register a PATCH route, directly or as a decorator."""
        return self._verb("PATCH", path, handler)

    def delete(self, path: str, handler: Handler | None = None) -> Handler | Decorator:
        """Register a DELETE route, directly or as a decorator."""
        return self._verb("DELETE", path, handler)

    def options(self, path: str, handler: Handler | None = None) -> Handler | Decorator:
        """Register an OPTIONS route, directly or as a decorator."""
        return self._verb("OPTIONS", path, handler)

    @property
    def routes(self) -> list[Route]:
        """Registered routes, in registration order."""
        return self._router.routes

    # -- Middleware --

    def use(self, middleware: Middleware) -> Middleware:
        """Append a middleware; it wraps every route.

        The first registered middleware is the outermost layer. Returns
        the middleware so ``use`` also works as a decorator.
        """
        self._check_not_frozen()
        self._middleware_list.append(middleware)
        return middleware

    # -- Dispatch --

    def dispatch(self, incoming: IncomingRequest, *, emit: Emitter | None = None) -> DispatchResult:
        """Handle one request and return how it ended.

        *emit* receives the ``SentResponse`` when it is sent. The same
        record is available as ``result.response``.
        """
        self._ensure_frozen()
        return handle_request(
            incoming,
            router=self._router,
            middleware=self._middleware,
            emit=emit,
            not_found_body=self.config.not_found_body,
            debug=self.config.debug,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point."""
        from velix.server.asgi import handle_asgi

        self._ensure_frozen()
        await handle_asgi(self, scope, receive, send)

    # -- Freezing --

    def _ensure_frozen(self) -> None:
        """Freeze the app on first use, exactly once."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the route table and the middleware tuple."""
        if self.config.log_level is not None:
            logging.getLogger("velix").setLevel(self.config.log_level.upper())

        middleware = list(self._middleware_list)
        if self.config.cors is not None:
            middleware.insert(0, CORSMiddleware(self.config.cors))

        self._middleware = tuple(middleware)
        self._router.compile()
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started handling requests. "
                "Register routes and middleware before the first dispatch."
            )
            raise ConfigurationError(msg)
