"""ASGI transport — turns ASGI scope/messages into an IncomingRequest.

The only component that touches raw ASGI. Reads the body on the event
loop, decodes query and form data, runs the synchronous dispatch in a
worker thread, and sends the emitted response back through ``send()``.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

import anyio.to_thread

from velix._internal.asgi import Receive, Scope, Send
from velix.http.forms import FormFields, FormFiles, is_form, parse_form_data
from velix.http.headers import Headers
from velix.http.query import parse_query
from velix.http.request import IncomingRequest
from velix.server.sender import plain_response, send_response

if TYPE_CHECKING:
    from velix.app import App

logger = logging.getLogger("velix.server")


class BodyTooLarge(Exception):  # noqa: N818
    """The request body exceeded ``AppConfig.max_content_length``."""


async def read_body(receive: Receive, limit: int) -> bytes:
    """Read the full request body, refusing more than *limit* bytes."""
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunk = message.get("body", b"")
        if chunk:
            size += len(chunk)
            if size > limit:
                raise BodyTooLarge
            chunks.append(chunk)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def handle_asgi(app: App, scope: Scope, receive: Receive, send: Send) -> None:
    """ASGI entry point used by ``App.__call__``."""
    if scope["type"] == "lifespan":
        await _handle_lifespan(receive, send)
        return
    if scope["type"] != "http":
        return

    headers = Headers.from_asgi(scope.get("headers", ()))

    try:
        body = await read_body(receive, app.config.max_content_length)
    except BodyTooLarge:
        logger.debug("413 %s %s", scope["method"], scope["path"])
        await send_response(plain_response(413, "Payload Too Large"), send)
        return

    form: FormFields = {}
    files: FormFiles = {}
    content_type = headers.get("content-type")
    if body and is_form(content_type):
        try:
            form, files = parse_form_data(body, content_type or "")
        except ValueError as exc:
            logger.debug("400 %s %s: %s", scope["method"], scope["path"], exc)
            await send_response(plain_response(400, "Bad Request"), send)
            return

    incoming = IncomingRequest(
        method=scope["method"],
        path=scope["path"],
        query=parse_query(scope.get("query_string", b"")),
        form=form,
        body=body,
        headers=headers,
        files=files,
    )

    result = await anyio.to_thread.run_sync(functools.partial(app.dispatch, incoming))
    await send_response(result.response, send)


async def _handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge startup and shutdown; velix has no lifecycle hooks."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
