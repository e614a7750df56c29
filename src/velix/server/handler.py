"""Request dispatch — match, build the pipeline, run it, contain failures.

The only place where a request moves through its states::

    MATCHING -> PIPELINE_BUILD -> EXECUTING -> RESPONDED | NOT_FOUND | ERRORED

Handler failures are contained inside the terminal continuation, so
middleware sees ``next()`` return normally with the 500 already sent.
Middleware failures are contained at the dispatch boundary. Exactly one
response is emitted per call, and no exception escapes.
"""

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from velix._internal.types import Emitter
from velix.http.request import IncomingRequest, Request
from velix.http.response import Response, SentResponse
from velix.middleware.pipeline import build_pipeline
from velix.middleware.protocol import Middleware
from velix.routing.route import RouteMatch
from velix.routing.router import Router
from velix.server.errors import handle_internal_error, handle_not_found

logger = logging.getLogger("velix.server")


class DispatchState(enum.StrEnum):
    """How a dispatch call ended."""

    RESPONDED = "responded"
    NOT_FOUND = "not_found"
    ERRORED = "errored"


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of one dispatch: final state, emitted response, contained error."""

    state: DispatchState
    response: SentResponse
    error: Exception | None = None

    @property
    def status(self) -> int:
        return self.response.status


def handle_request(
    incoming: IncomingRequest,
    *,
    router: Router,
    middleware: Sequence[Middleware],
    emit: Emitter | None = None,
    not_found_body: str = "Not Found",
    debug: bool = False,
) -> DispatchResult:
    """Process a single request through routing, middleware and handler."""
    response = Response(emit)

    match = router.match(incoming.method, incoming.path)
    if match is None:
        sent = handle_not_found(incoming, response, not_found_body)
        return DispatchResult(DispatchState.NOT_FOUND, sent)

    request = Request.build(incoming, match.path_params)
    contained: list[Exception] = []

    def terminal() -> Any:
        # Handler failures are answered here; next() returns the 500
        try:
            return _invoke_handler(match, request, response)
        except Exception as exc:
            contained.append(exc)
            return handle_internal_error(exc, request, response, debug=debug)

    pipeline = build_pipeline(middleware, request, response, terminal)

    try:
        pipeline()
    except Exception as exc:
        sent = handle_internal_error(exc, request, response, debug=debug)
        return DispatchResult(DispatchState.ERRORED, sent, exc)

    if contained:
        assert response.emitted is not None
        return DispatchResult(DispatchState.ERRORED, response.emitted, contained[0])

    # Short-circuiting middleware or a handler that neither returned nor sent
    if response.emitted is None:
        response.send()

    assert response.emitted is not None
    return DispatchResult(DispatchState.RESPONDED, response.emitted)


def _invoke_handler(match: RouteMatch, request: Request, response: Response) -> Any:
    """Call the matched handler and auto-send a returned value as JSON."""
    result = match.route.handler(request, response)

    if result is None or isinstance(result, SentResponse):
        return result

    if response.sent:
        logger.debug(
            "Ignoring return value of %s %s: response was already sent",
            match.route.method,
            match.route.path,
        )
        return result

    response.json(result)
    return result
