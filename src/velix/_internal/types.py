"""Shared type aliases used across velix modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: called as handler(request, response), may return a JSON-able value
Handler: TypeAlias = Callable[..., Any]

# Transport sink: receives the SentResponse exactly once per request
Emitter: TypeAlias = Callable[[Any], None]
