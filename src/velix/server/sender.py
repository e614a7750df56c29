"""ASGI response sending — translates a SentResponse into ASGI messages."""

from velix._internal.asgi import Send
from velix.http.response import TEXT_CONTENT_TYPE, SentResponse


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def plain_response(status: int, text: str) -> SentResponse:
    """A text/plain response produced by the transport itself (400, 413)."""
    return SentResponse(
        status=status,
        headers=(("Content-Type", TEXT_CONTENT_TYPE),),
        body=text.encode("utf-8"),
    )


async def send_response(response: SentResponse, send: Send) -> None:
    """Translate a SentResponse into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.header_lines
        if name.lower() != "content-length"
    ]

    body = response.body if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
