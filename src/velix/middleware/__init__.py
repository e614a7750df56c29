"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    def mw(request: Request, response: Response, next: Next) -> Any

Built-in middleware:
    CORSMiddleware -- Access-Control-* headers and preflight answers
"""

from velix.middleware.builtin import CORSMiddleware
from velix.middleware.pipeline import build_pipeline
from velix.middleware.protocol import Middleware, Next

__all__ = [
    "CORSMiddleware",
    "Middleware",
    "Next",
    "build_pipeline",
]
