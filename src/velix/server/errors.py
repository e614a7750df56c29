"""Fallback responses for unmatched and failed requests.

The router reports no match as ``None``; a handler or middleware
failure arrives here as an exception. Both become a response the
transport can emit: 404 plain text, or 500 JSON.
"""

import logging
from typing import Any

from velix.http.request import IncomingRequest, Request
from velix.http.response import Response, SentResponse

logger = logging.getLogger("velix.server")


def error_message(exc: BaseException) -> str:
    """Human-readable description; never empty."""
    return str(exc) or type(exc).__name__


def error_payload(exc: BaseException, *, debug: bool = False) -> dict[str, Any]:
    """JSON body for a 500 response."""
    payload: dict[str, Any] = {"error": True, "message": error_message(exc)}
    if debug:
        payload["exception"] = type(exc).__name__
    return payload


def handle_not_found(incoming: IncomingRequest, response: Response, body: str) -> SentResponse:
    """Emit a plain-text 404 for a request no route matched."""
    logger.debug("404 %s %s", incoming.method, incoming.path)
    return response.status(404).text(body)


def handle_internal_error(
    exc: Exception,
    request: Request,
    response: Response,
    *,
    debug: bool = False,
) -> SentResponse:
    """Convert a failure inside the pipeline into a 500 JSON response.

    If the pipeline had already emitted, the error is logged and the
    emitted response stands.
    """
    logger.exception("500 %s /%s", request.method, request.path)

    if response.emitted is not None:
        return response.emitted

    return response.status(500).json(error_payload(exc, debug=debug))
