"""Pipeline construction — folds middleware around a terminal handler.

The first registered middleware is the outermost layer. Each layer gets
a continuation that may be called at most once; a second call raises
``PipelineError`` instead of re-running the inner layers.
"""

from collections.abc import Callable, Sequence
from typing import Any

from velix.errors import PipelineError
from velix.http.request import Request
from velix.http.response import Response
from velix.middleware.protocol import Middleware, Next


class _Continuation:
    """Single-use wrapper around the next layer of a pipeline."""

    __slots__ = ("_called", "_target")

    def __init__(self, target: Callable[[], Any]) -> None:
        self._target = target
        self._called = False

    def __call__(self) -> Any:
        if self._called:
            msg = "next() was called more than once in the same request."
            raise PipelineError(msg)
        self._called = True
        return self._target()


def build_pipeline(
    middleware: Sequence[Middleware],
    request: Request,
    response: Response,
    terminal: Callable[[], Any],
) -> Next:
    """Compose *middleware* right-to-left around *terminal*.

    Returns the outermost zero-argument continuation. Calling it runs
    the whole chain for this request.
    """
    handler: Next = _Continuation(terminal)
    for mw in reversed(middleware):

        def layer(_mw: Middleware = mw, _next: Next = handler) -> Any:
            return _mw(request, response, _next)

        handler = _Continuation(layer)
    return handler
