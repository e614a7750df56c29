"""Tests for velix.server.asgi — the ASGI transport around App.dispatch."""

import json
from typing import Any

import pytest

from velix.app import App
from velix.config import AppConfig
from velix.server.asgi import read_body


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    """Create an ASGI receive callable that yields bodies."""
    messages = []
    for i, body in enumerate(bodies):
        is_last = i == len(bodies) - 1
        messages.append({"type": "http.request", "body": body, "more_body": not is_last})
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


class _Sent:
    """Collects ASGI send() messages."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def status(self) -> int:
        return self.messages[0]["status"]

    @property
    def headers(self) -> list[tuple[bytes, bytes]]:
        return self.messages[0]["headers"]

    @property
    def body(self) -> bytes:
        return self.messages[1]["body"]


def _upload(request, response):
    f = request.file("doc")
    return {"filename": f.filename if f else None, "title": request.input("title")}


def _app() -> App:
    app = App(AppConfig(max_content_length=64))

    @app.get("/users/{id}")
    def show(request, response):
        return {"id": request.param("id"), "q": request.query("q")}

    @app.post("/echo")
    def echo(request, response):
        return {"input": request.only(["name", "tag"]), "agent": request.header("user-agent")}

    @app.get("/login")
    def login(request, response):
        response.cookie("session", "abc").status(204).send("ignored")

    @app.get("/go")
    def go(request, response):
        response.redirect("/日本 語")

    @app.get("/named")
    def named(request, response):
        response.header("X-Name", "日本")
        return {"ok": True}

    return app


@pytest.mark.anyio
class TestASGI:
    async def test_json_route(self) -> None:
        sent = _Sent()
        await _app()(_make_scope(path="/users/42", query_string=b"q=hi"), _make_receive(), sent)

        assert sent.status == 200
        assert (b"content-type", b"application/json; charset=utf-8") in sent.headers
        assert json.loads(sent.body) == {"id": "42", "q": "hi"}
        assert (b"content-length", str(len(sent.body)).encode()) in sent.headers

    async def test_not_found(self) -> None:
        sent = _Sent()
        await _app()(_make_scope(path="/missing"), _make_receive(), sent)

        assert sent.status == 404
        assert sent.body == b"Not Found"

    async def test_urlencoded_form_body(self) -> None:
        sent = _Sent()
        scope = _make_scope(
            method="POST",
            path="/echo",
            headers=[
                (b"content-type", b"application/x-www-form-urlencoded"),
                (b"user-agent", b"pytest"),
            ],
        )
        await _app()(scope, _make_receive(b"name=Ada&", b"tag=a&tag=b"), sent)

        assert json.loads(sent.body) == {
            "input": {"name": "Ada", "tag": ["a", "b"]},
            "agent": "pytest",
        }

    async def test_json_body(self) -> None:
        sent = _Sent()
        scope = _make_scope(
            method="POST", path="/echo", headers=[(b"content-type", b"application/json")]
        )
        await _app()(scope, _make_receive(b'{"name": "Zo\xc3\xab"}'), sent)

        assert json.loads(sent.body)["input"] == {"name": "Zoë"}

    async def test_multipart_body(self) -> None:
        body = (
            b"--b1\r\n"
            b'Content-Disposition: form-data; name="title"\r\n\r\n'
            b"Report\r\n"
            b"--b1\r\n"
            b'Content-Disposition: form-data; name="doc"; filename="r.txt"\r\n'
            b"Content-Type: text/plain\r\n\r\n"
            b"x\r\n"
            b"--b1--\r\n"
        )
        sent = _Sent()
        app = App()
        app.post("/upload", _upload)
        scope = _make_scope(
            method="POST",
            path="/upload",
            headers=[(b"content-type", b"multipart/form-data; boundary=b1")],
        )
        await app(scope, _make_receive(body), sent)

        assert json.loads(sent.body) == {"filename": "r.txt", "title": "Report"}

    async def test_body_too_large(self) -> None:
        sent = _Sent()
        scope = _make_scope(method="POST", path="/echo")
        await _app()(scope, _make_receive(b"x" * 40, b"y" * 40), sent)

        assert sent.status == 413
        assert sent.body == b"Payload Too Large"

    async def test_bad_multipart_is_400(self) -> None:
        sent = _Sent()
        scope = _make_scope(
            method="POST", path="/echo", headers=[(b"content-type", b"multipart/form-data")]
        )
        await _app()(scope, _make_receive(b"--x"), sent)

        assert sent.status == 400

    async def test_no_body_for_204_and_cookie_header(self) -> None:
        sent = _Sent()
        await _app()(_make_scope(path="/login"), _make_receive(), sent)

        assert sent.status == 204
        assert sent.body == b""
        assert (b"content-length", b"0") in sent.headers
        cookies = [value for name, value in sent.headers if name == b"set-cookie"]
        assert len(cookies) == 1
        assert cookies[0].startswith(b"session=abc")

    async def test_non_ascii_redirect_is_percent_encoded(self) -> None:
        sent = _Sent()
        await _app()(_make_scope(path="/go"), _make_receive(), sent)

        assert sent.status == 302
        assert (b"location", b"/%E6%97%A5%E6%9C%AC%20%E8%AA%9E") in sent.headers

    async def test_non_latin1_header_becomes_500(self) -> None:
        sent = _Sent()
        await _app()(_make_scope(path="/named"), _make_receive(), sent)

        assert sent.status == 500
        assert json.loads(sent.body)["error"] is True
        assert all(name != b"x-name" for name, _ in sent.headers)

    async def test_lifespan(self) -> None:
        messages = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])

        async def receive():
            return next(messages)

        sent = _Sent()
        await _app()({"type": "lifespan"}, receive, sent)
        assert [m["type"] for m in sent.messages] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    async def test_websocket_scope_ignored(self) -> None:
        sent = _Sent()
        await _app()({"type": "websocket"}, _make_receive(), sent)
        assert sent.messages == []


@pytest.mark.anyio
class TestReadBody:
    async def test_joins_chunks(self) -> None:
        assert await read_body(_make_receive(b"ab", b"cd"), limit=10) == b"abcd"

    async def test_disconnect_stops_reading(self) -> None:
        async def receive():
            return {"type": "http.disconnect"}

        assert await read_body(receive, limit=10) == b""
