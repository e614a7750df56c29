"""Custom Middleware — function and class middleware examples.

Demonstrates:
- Function middleware (request id — adds X-Request-Id header)
- Class middleware (rate limiter — 5 req/min per IP, sends 429 when exceeded)
- Short-circuiting: a middleware that sends without calling ``next()``
- threading.Lock for shared state (dispatch runs in worker threads)

Middleware runs in registration order: the first ``app.use()`` is the
outermost layer. Headers are set before calling ``next()``; once the
handler sends, the response is closed.

Run with any ASGI server:
    cd examples/custom_middleware && uvicorn app:app
"""

import threading
import time
import uuid
from typing import Any

from velix import App, Request, Response
from velix.middleware.protocol import Next

app = App()


# ---------------------------------------------------------------------------
# Function middleware — request id
# ---------------------------------------------------------------------------

def request_id(request: Request, response: Response, next: Next) -> Any:
    """Tag every response with an X-Request-Id header."""
    response.header("X-Request-Id", request.header("x-request-id") or uuid.uuid4().hex)
    return next()


# ---------------------------------------------------------------------------
# Class middleware — rate limiter
# ---------------------------------------------------------------------------


class RateLimiter:
    """Per-IP rate limiter. Sends 429 when limit exceeded."""

    def __init__(self, max_requests: int, window: float) -> None:
        self.max_requests = max_requests
        self.window = window
        self._counts: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def __call__(self, request: Request, response: Response, next: Next) -> Any:
        # X-Forwarded-For if behind a proxy; else a fixed client identifier
        client_ip = request.header("x-forwarded-for", "127.0.0.1") or "127.0.0.1"
        if "," in client_ip:
            client_ip = client_ip.split(",")[0].strip()

        with self._lock:
            now = time.monotonic()
            hits = self._counts.setdefault(client_ip, [])
            hits[:] = [t for t in hits if now - t < self.window]

            if len(hits) >= self.max_requests:
                return response.status(429).text("Too Many Requests")
            hits.append(now)

        return next()


# ---------------------------------------------------------------------------
# Class middleware — token guard on /admin
# ---------------------------------------------------------------------------


class RequireToken:
    """Reject requests under *prefix* that lack the expected bearer token."""

    def __init__(self, prefix: str, token: str) -> None:
        self.prefix = prefix.strip("/")
        self.token = token

    def __call__(self, request: Request, response: Response, next: Next) -> Any:
        if request.path.startswith(self.prefix):
            if request.header("authorization") != f"Bearer {self.token}":
                return response.status(401).json({"error": "unauthorized"})
        return next()


# ---------------------------------------------------------------------------
# Middleware stack (order: first added runs first on request)
# ---------------------------------------------------------------------------

app.use(RateLimiter(max_requests=5, window=60.0))
app.use(request_id)
app.use(RequireToken("/admin", "s3cret"))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/")
def index(request: Request, response: Response):
    """Simple OK response."""
    response.text("OK")


@app.get("/admin/stats")
def stats(request: Request, response: Response):
    """Protected route."""
    return {"requests": "many"}
