"""Mutable HTTP response builder with a single emit point.

Non-terminal calls (``status``, ``header``, ``cookie``, ``allow_cors``)
return the same Response so they chain. Terminal calls (``json``,
``text``, ``redirect``, ``send``) finalize it: ``send`` builds a frozen
``SentResponse`` and hands it to the transport, exactly once.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from velix._internal.types import Emitter
from velix.errors import ResponseAlreadySent
from velix.http.cookies import SetCookie
from velix.http.cors import CORSConfig

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

# Characters left as-is when percent-encoding a redirect target
_URL_SAFE = ":/?#[]@!$&'()*+,;=%~"


def _check_header(name: str, value: str) -> None:
    """Reject header text the wire format cannot carry."""
    for text in (name, value):
        if "\r" in text or "\n" in text:
            msg = f"Header {name!r} contains a line break."
            raise ValueError(msg)
        try:
            text.encode("latin-1")
        except UnicodeEncodeError:
            msg = f"Header {name!r} has non-latin-1 text {text!r}."
            raise ValueError(msg) from None


@dataclass(frozen=True, slots=True)
class SentResponse:
    """What a Response emitted: status, ordered headers, cookies, body."""

    status: int
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()
    body: bytes = b""

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive lookup of an emitted header."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return default

    @property
    def header_lines(self) -> tuple[tuple[str, str], ...]:
        """Headers followed by one ``Set-Cookie`` pair per cookie."""
        cookie_lines = tuple(("Set-Cookie", c.to_header_value()) for c in self.cookies)
        return (*self.headers, *cookie_lines)

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Body parsed as JSON."""
        return json_module.loads(self.body)


class Response:
    """Per-request response state.

    Usage inside a handler::

        def show(request, response):
            response.status(201).header("X-Trace", "abc").json({"ok": True})

    *emit* is the transport sink; it receives the ``SentResponse`` when
    the response is sent. The emitted record is also kept on
    ``response.emitted``.
    """

    __slots__ = ("_cookies", "_emit", "_headers", "_status", "emitted")

    def __init__(self, emit: Emitter | None = None) -> None:
        self._status = 200
        self._headers: dict[str, str] = {}
        self._cookies: list[SetCookie] = []
        self._emit = emit
        self.emitted: SentResponse | None = None

    # -- State --

    @property
    def sent(self) -> bool:
        """True once a terminal operation has emitted the response."""
        return self.emitted is not None

    @property
    def status_code(self) -> int:
        return self._status

    @property
    def headers(self) -> Mapping[str, str]:
        """Headers set so far, in insertion order (read-only copy)."""
        return dict(self._headers)

    @property
    def cookies(self) -> tuple[SetCookie, ...]:
        return tuple(self._cookies)

    def _ensure_open(self, operation: str) -> None:
        if self.emitted is not None:
            raise ResponseAlreadySent(operation)

    # -- Chainable --

    def status(self, code: int) -> Response:
        """Set the status code."""
        self._ensure_open("status")
        self._status = int(code)
        return self

    def header(self, name: str, value: Any) -> Response:
        """Set a header. Setting an existing name replaces it in place.

        Raises ``ValueError`` for line breaks or text outside latin-1.
        """
        self._ensure_open("header")
        text = str(value)
        _check_header(name, text)
        self._headers[name] = text
        return self

    def cookie(
        self,
        name: str,
        value: str,
        *,
        expires: int | float | None = None,
        max_age: int | None = None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        samesite: str = "lax",
    ) -> Response:
        """Queue a ``Set-Cookie`` directive."""
        self._ensure_open("cookie")
        directive = SetCookie(
            name=name,
            value=value,
            expires=expires,
            max_age=max_age,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            samesite=samesite,
        )
        _check_header("Set-Cookie", directive.to_header_value())
        self._cookies.append(directive)
        return self

    def forget_cookie(self, name: str, path: str = "/") -> Response:
        """Queue a directive that deletes a cookie (Max-Age=0)."""
        self._ensure_open("forget_cookie")
        self._cookies.append(SetCookie(name=name, value="", max_age=0, path=path))
        return self

    def allow_cors(
        self,
        config: CORSConfig | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> Response:
        """Set Access-Control-* headers.

        *config* is a ``CORSConfig`` or a mapping of option names
        (``origin``, ``credentials``, ``headers``, ``methods``); keyword
        overrides are applied on top. Unset options keep their defaults.
        ``Access-Control-Allow-Credentials`` is only set when
        ``credentials`` is truthy. Does not send the response.
        """
        self._ensure_open("allow_cors")
        if isinstance(config, CORSConfig):
            cfg = config
        else:
            cfg = CORSConfig().merged(config or {})
        if overrides:
            cfg = cfg.merged(overrides)

        for name, value in cfg.header_pairs():
            self.header(name, value)
        return self

    # -- Terminal --

    def json(self, data: Any) -> SentResponse:
        """Serialize *data* as JSON (non-ASCII kept as-is) and send it."""
        self._ensure_open("json")
        body = json_module.dumps(data, ensure_ascii=False)
        self.header("Content-Type", JSON_CONTENT_TYPE)
        return self.send(body)

    def text(self, text: str) -> SentResponse:
        """Send *text* as ``text/plain``."""
        self._ensure_open("text")
        self.header("Content-Type", TEXT_CONTENT_TYPE)
        return self.send(text)

    def redirect(self, url: str, status: int = 302) -> SentResponse:
        """Send a redirect to *url* with an empty body.

        Non-ASCII characters and spaces in *url* are percent-encoded as UTF-8.
        """
        self._ensure_open("redirect")
        return self.status(status).header("Location", quote(url, safe=_URL_SAFE)).send()

    def send(self, body: str | bytes | bytearray = "") -> SentResponse:
        """Emit status, headers, cookies and *body*. Only ever once."""
        self._ensure_open("send")
        if isinstance(body, str):
            payload = body.encode("utf-8")
        elif isinstance(body, (bytes, bytearray)):
            payload = bytes(body)
        else:
            msg = f"Response body must be str or bytes, not {type(body).__name__}."
            raise TypeError(msg)
        sent = SentResponse(
            status=self._status,
            headers=tuple(self._headers.items()),
            cookies=tuple(self._cookies),
            body=payload,
        )
        self.emitted = sent
        if self._emit is not None:
            self._emit(sent)
        return sent

    def __repr__(self) -> str:
        state = "sent" if self.sent else "open"
        return f"<Response {self._status} {state}>"
