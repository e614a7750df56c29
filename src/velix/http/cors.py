"""CORS header configuration shared by Response.allow_cors and CORSMiddleware."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from typing import Any

from velix.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """Access-Control-* header values.

    Defaults allow any origin, the common request headers, and every
    method the router registers shortcuts for. Override what you need::

        CORSConfig(origin="https://example.com", credentials=True)
    """

    origin: str = "*"
    credentials: bool = False
    headers: str | Sequence[str] = ("Content-Type", "Authorization")
    methods: str | Sequence[str] = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

    def merged(self, overrides: Mapping[str, Any]) -> CORSConfig:
        """Return a copy with *overrides* applied over these values.

        Raises ``ConfigurationError`` for option names this config does not have.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            msg = f"Unknown CORS option(s): {', '.join(unknown)}"
            raise ConfigurationError(msg)
        return replace(self, **overrides)

    def header_pairs(self) -> list[tuple[str, str]]:
        """The headers this config produces, in emission order."""
        pairs = [
            ("Access-Control-Allow-Origin", self.origin),
            ("Access-Control-Allow-Headers", _join(self.headers)),
            ("Access-Control-Allow-Methods", _join(self.methods)),
        ]
        if self.credentials:
            pairs.append(("Access-Control-Allow-Credentials", "true"))
        return pairs


def _join(value: str | Sequence[str]) -> str:
    if isinstance(value, str):
        return value
    return ", ".join(value)
