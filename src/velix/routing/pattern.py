"""Route template compilation.

Turns a template such as ``/users/{id}/posts/{slug}`` into an anchored
regex with one named group per placeholder. Literal text is escaped, so
``.`` or ``+`` in a template only ever match themselves.

Examples::

    compile_pattern("/users/{id}").match("/users/42")     -> {"id": "42"}
    compile_pattern("/users/{id}").match("/users/42/x")   -> None
    compile_pattern("/files/{name}.json").match("files/a.json") -> {"name": "a"}
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from velix.errors import ConfigurationError

# {name}: name is one or more Unicode word characters
PLACEHOLDER = re.compile(r"\{(\w+)\}")

# A placeholder matches one non-empty path segment
SEGMENT = r"[^/]+"

_FLASK_STYLE = re.compile(r"<[^<>/]+>")


def normalize_path(path: str) -> str:
    """Strip leading and trailing slashes: ``"/users/42/"`` -> ``"users/42"``."""
    return path.strip("/")


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A compiled route template.

    ``match()`` returns the captured parameters on a full match (an empty
    dict when the template has no placeholders) or ``None``.
    """

    template: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]

    def match(self, path: str) -> dict[str, str] | None:
        """Match a request path against this pattern."""
        m = self.regex.fullmatch(normalize_path(path))
        if m is None:
            return None
        return m.groupdict()


def _check_template(template: str, names: list[str]) -> None:
    if _FLASK_STYLE.search(template):
        msg = (
            f"Route template {template!r} uses <param> syntax. "
            "Velix expects {param} placeholders, e.g. '/users/{id}'."
        )
        raise ConfigurationError(msg)

    seen: set[str] = set()
    for name in names:
        if not name.isidentifier():
            msg = f"Placeholder {{{name}}} in {template!r} is not a valid identifier."
            raise ConfigurationError(msg)
        if name in seen:
            msg = f"Route template {template!r} repeats the placeholder {{{name}}}."
            raise ConfigurationError(msg)
        seen.add(name)


@lru_cache(maxsize=512)
def compile_pattern(template: str) -> CompiledPattern:
    """Compile a route template into a ``CompiledPattern``.

    Raises ``ConfigurationError`` for duplicate placeholder names and for
    Flask-style ``<param>`` templates.
    """
    route = normalize_path(template)
    names = PLACEHOLDER.findall(route)
    _check_template(template, names)

    parts: list[str] = []
    pos = 0
    for m in PLACEHOLDER.finditer(route):
        parts.append(re.escape(route[pos : m.start()]))
        parts.append(f"(?P<{m.group(1)}>{SEGMENT})")
        pos = m.end()
    parts.append(re.escape(route[pos:]))

    return CompiledPattern(
        template=template,
        regex=re.compile("".join(parts)),
        param_names=tuple(names),
    )
