"""Cookies — the ``Cookie`` request header and ``Set-Cookie`` directives.

Reading: ``parse_cookies`` turns the request header into a dict. The
first occurrence of a name wins (clients list the most specific path
first), surrounding double quotes are dropped and percent-escapes are
decoded.

Writing: ``SetCookie`` is one directive queued by ``Response.cookie``.
Characters RFC 6265 forbids in a cookie value are percent-encoded, so
whatever a handler stores reads back unchanged through ``parse_cookies``.
"""

from dataclasses import dataclass
from email.utils import formatdate
from urllib.parse import quote, unquote

SAMESITE_VALUES = frozenset({"lax", "strict", "none"})

# cookie-octet without "%", which is reserved for escapes
_VALUE_SAFE = "!#$&'()*+-./:<=>?@[]^_`{|}~"

_NAME_SEPARATORS = frozenset('()<>@,;:\\"/[]?={} \t')


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Pairs without ``=`` or with an empty name are skipped.
    """
    cookies: dict[str, str] = {}
    for chunk in header.split(";"):
        name, sep, value = chunk.strip().partition("=")
        name = name.strip()
        if not sep or not name or name in cookies:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        cookies[name] = unquote(value)
    return cookies


def _valid_name(name: str) -> bool:
    return bool(name) and all(33 <= ord(c) <= 126 and c not in _NAME_SEPARATORS for c in name)


@dataclass(frozen=True, slots=True)
class SetCookie:
    """One ``Set-Cookie`` directive queued on a Response.

    ``expires`` is a unix timestamp rendered as an HTTP-date; ``max_age``
    is in seconds. ``samesite`` is ``"lax"``, ``"strict"``, ``"none"``,
    or empty to leave the attribute out. Browsers drop ``SameSite=None``
    cookies that are not ``Secure``, so that combination is rejected.
    """

    name: str
    value: str
    expires: int | float | None = None
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"

    def __post_init__(self) -> None:
        if not _valid_name(self.name):
            msg = f"Invalid cookie name {self.name!r}: use visible ASCII without separators."
            raise ValueError(msg)
        samesite = self.samesite.lower()
        if samesite and samesite not in SAMESITE_VALUES:
            msg = f"SameSite must be one of {sorted(SAMESITE_VALUES)}, got {self.samesite!r}."
            raise ValueError(msg)
        if samesite == "none" and not self.secure:
            msg = f"Cookie {self.name!r} uses SameSite=None and must also be Secure."
            raise ValueError(msg)

    def attributes(self) -> list[str]:
        """Attributes that follow ``name=value``, in emission order."""
        valued = (
            ("Expires", None if self.expires is None else formatdate(self.expires, usegmt=True)),
            ("Max-Age", None if self.max_age is None else str(self.max_age)),
            ("Path", self.path or None),
            ("Domain", self.domain or None),
        )
        attrs = [f"{label}={value}" for label, value in valued if value is not None]
        if self.secure:
            attrs.append("Secure")
        if self.httponly:
            attrs.append("HttpOnly")
        if self.samesite:
            attrs.append(f"SameSite={self.samesite}")
        return attrs

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        pair = f"{self.name}={quote(self.value, safe=_VALUE_SAFE)}"
        return "; ".join([pair, *self.attributes()])
