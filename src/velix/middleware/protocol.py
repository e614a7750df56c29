"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    def my_mw(request: Request, response: Response, next: Next) -> Any: ...

No base class required. The framework checks the shape, not the lineage.

``next()`` takes no arguments: the request and response are shared by
every layer of one pipeline. It returns whatever the inner layer
returned (for the innermost layer, the handler's return value).
"""

from collections.abc import Callable
from typing import Any, Protocol

from velix.http.request import Request
from velix.http.response import Response

# The next layer in the middleware chain
type Next = Callable[[], Any]


class Middleware(Protocol):
    """Protocol for velix middleware.

    Accepts both functions and callable objects::

        # Function middleware
        def timing(request: Request, response: Response, next: Next) -> Any:
            start = time.monotonic()
            result = next()
            logger.info("%s took %.3fs", request.path, time.monotonic() - start)
            return result

        # Class middleware
        class RequireToken:
            def __call__(self, request, response, next):
                if request.header("Authorization") is None:
                    return response.status(401).json({"error": "unauthorized"})
                return next()
    """

    def __call__(self, request: Request, response: Response, next: Next) -> Any: ...
