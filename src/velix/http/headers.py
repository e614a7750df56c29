"""Immutable, case-insensitive HTTP headers.

Implements ``Mapping[str, str]``. Names keep the casing the transport
delivered; lookups fold case.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

type HeaderSource = Mapping[str, str] | Iterable[tuple[str, str]]


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. repeated ``Accept``).
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: HeaderSource | None = None) -> None:
        if raw is None:
            pairs: tuple[tuple[str, str], ...] = ()
        elif isinstance(raw, Mapping):
            pairs = tuple((str(k), str(v)) for k, v in raw.items())
        else:
            pairs = tuple((str(k), str(v)) for k, v in raw)
        object.__setattr__(self, "_raw", pairs)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key_lower = key.lower()
        return [value for name, value in self._raw if name.lower() == key_lower]

    @property
    def raw(self) -> tuple[tuple[str, str], ...]:
        """Header pairs as received, original casing and order."""
        return self._raw

    @classmethod
    def from_asgi(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Decode ASGI header byte pairs (latin-1, per the HTTP spec)."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)
