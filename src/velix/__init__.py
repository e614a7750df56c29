"""Velix — a small HTTP router with a middleware pipeline.

Matches method + path against ``{name}`` templates, runs middleware,
calls the handler, and emits exactly one response per request.

Basic usage::

    from velix import App

    app = App()

    @app.get("/hello/{name}")
    def hello(request, response):
        return {"message": f"Hello, {request.param('name')}!"}

Serve it with any ASGI server (``uvicorn module:app``), or drive it
directly with ``app.dispatch(IncomingRequest(...))``.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "CORSConfig",
    "CORSMiddleware",
    "ConfigurationError",
    "DispatchResult",
    "DispatchState",
    "IncomingRequest",
    "Middleware",
    "Next",
    "PipelineError",
    "Request",
    "Response",
    "ResponseAlreadySent",
    "SentResponse",
    "VelixError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import velix`` fast while providing a clean top-level API.
    """
    if name == "App":
        from velix.app import App

        return App

    if name == "AppConfig":
        from velix.config import AppConfig

        return AppConfig

    if name == "CORSConfig":
        from velix.http.cors import CORSConfig

        return CORSConfig

    if name in ("IncomingRequest", "Request"):
        from velix.http import request as _req

        return getattr(_req, name)

    if name in ("Response", "SentResponse"):
        from velix.http import response as _resp

        return getattr(_resp, name)

    if name in ("CORSMiddleware", "Middleware", "Next"):
        from velix import middleware as _mw

        return getattr(_mw, name)

    if name in ("DispatchResult", "DispatchState"):
        from velix.server import handler as _handler

        return getattr(_handler, name)

    if name in ("ConfigurationError", "PipelineError", "ResponseAlreadySent", "VelixError"):
        from velix import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
