"""Built-in middleware: CORS.

Adds Access-Control-* headers to every routed response and answers
``OPTIONS`` requests directly.
"""

from collections.abc import Mapping
from typing import Any

from velix.http.cors import CORSConfig
from velix.http.request import Request
from velix.http.response import Response
from velix.middleware.protocol import Next


class CORSMiddleware:
    """Apply ``Response.allow_cors`` to every routed request.

    Preflight ``OPTIONS`` requests short-circuit with ``204`` and an
    empty body. The router still has to match them, so register an
    ``OPTIONS`` route for the paths that accept preflight.

    Usage::

        app.use(CORSMiddleware(CORSConfig(origin="https://example.com")))
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | Mapping[str, Any] | None = None) -> None:
        if isinstance(config, CORSConfig):
            self.config = config
        else:
            self.config = CORSConfig().merged(config or {})

    def __call__(self, request: Request, response: Response, next: Next) -> Any:
        """Set CORS headers, then answer preflight or delegate."""
        response.allow_cors(self.config)
        if request.method == "OPTIONS":
            return response.status(204).send()
        return next()
