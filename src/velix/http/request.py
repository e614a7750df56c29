"""Immutable HTTP request.

Frozen view of what the transport received, plus the path parameters
the router extracted. The request is honest about what it is: received
data that doesn't change.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from velix.http.cookies import parse_cookies
from velix.http.forms import UploadFile
from velix.http.headers import Headers
from velix.routing.pattern import normalize_path


@dataclass(frozen=True, slots=True)
class IncomingRequest:
    """Raw request data handed over by a transport.

    ``path`` may carry leading and trailing slashes; ``query`` and
    ``form`` are already-decoded maps; ``body`` is the raw request body
    used for JSON parsing. ``headers`` may be a plain dict; lookups on the
    built ``Request`` are case-insensitive either way.
    """

    method: str
    path: str
    query: Mapping[str, Any] = field(default_factory=dict)
    form: Mapping[str, Any] = field(default_factory=dict)
    body: bytes = b""
    headers: Headers | Mapping[str, str] = field(default_factory=Headers)
    files: Mapping[str, UploadFile] = field(default_factory=dict)


def parse_json_object(raw: bytes | str) -> dict[str, Any]:
    """Parse *raw* as a JSON object, or return ``{}``.

    Empty bodies, invalid JSON, undecodable bytes and JSON values that
    are not objects all yield an empty dict. Never raises.
    """
    if not raw:
        return {}
    try:
        value = json_module.loads(raw)
    except (ValueError, RecursionError):
        return {}
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Built once per dispatch by ``Request.build()``. Handlers and
    middleware read it through the accessors; missing keys fall back to
    the given default and never raise.

    A key whose value is ``None`` counts as absent for ``input()``,
    ``has()`` and ``only()``.
    """

    method: str
    path: str
    path_params: Mapping[str, str]
    query_params: Mapping[str, Any]
    form_data: Mapping[str, Any]
    json_body: Mapping[str, Any]
    headers: Headers
    files: Mapping[str, UploadFile] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)

    # -- Accessors --

    def input(self, key: str, default: Any = None) -> Any:
        """Look up *key* in the form body, then the JSON body.

        Form data wins when both carry the key.
        """
        value = self.form_data.get(key)
        if value is not None:
            return value
        value = self.json_body.get(key)
        if value is not None:
            return value
        return default

    def query(self, key: str, default: Any = None) -> Any:
        """Look up *key* in the query map."""
        value = self.query_params.get(key)
        return default if value is None else value

    def param(self, key: str, default: Any = None) -> Any:
        """Look up a path parameter captured by the route template."""
        value = self.path_params.get(key)
        return default if value is None else value

    def header(self, key: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup; the first matching header wins."""
        return self.headers.get(key, default)

    def file(self, key: str) -> UploadFile | None:
        """Uploaded file for a multipart form field, if any."""
        return self.files.get(key)

    def has(self, keys: Iterable[str]) -> bool:
        """True if every key is present in the form body, JSON body or query."""
        return all(
            self.form_data.get(k) is not None
            or self.json_body.get(k) is not None
            or self.query_params.get(k) is not None
            for k in keys
        )

    def only(self, keys: Iterable[str]) -> dict[str, Any]:
        """``input()`` values for *keys*, leaving out keys with no value."""
        data: dict[str, Any] = {}
        for key in keys:
            value = self.input(key)
            if value is not None:
                data[key] = value
        return data

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def is_json(self) -> bool:
        """True if the client declared a JSON body."""
        return "json" in (self.content_type or "").lower()

    # -- Factory --

    @classmethod
    def build(
        cls,
        incoming: IncomingRequest,
        path_params: Mapping[str, str] | None = None,
    ) -> Request:
        """Create a Request from transport data and matched path parameters."""
        headers = incoming.headers
        if not isinstance(headers, Headers):
            headers = Headers(headers)
        return cls(
            method=incoming.method.upper(),
            path=normalize_path(incoming.path),
            path_params=dict(path_params or {}),
            query_params=dict(incoming.query),
            form_data=dict(incoming.form),
            json_body=parse_json_object(incoming.body),
            headers=headers,
            files=dict(incoming.files),
            cookies=parse_cookies(headers.get("cookie", "") or ""),
        )
