"""Query string decoding.

The core consumes the query as a plain string-keyed map. A key that
appears once maps to its string value; a repeated key maps to the list
of its values in order of appearance.
"""

from collections.abc import Mapping
from urllib.parse import parse_qs

type QueryValue = str | list[str]


def collapse(parsed: Mapping[str, list[str]]) -> dict[str, QueryValue]:
    """Collapse ``parse_qs`` output: single values unwrap, repeats stay lists."""
    return {key: values[0] if len(values) == 1 else list(values) for key, values in parsed.items()}


def parse_query(query_string: str | bytes) -> dict[str, QueryValue]:
    """Decode a raw query string into a query map.

    Examples::

        parse_query("q=hello&page=2")  -> {"q": "hello", "page": "2"}
        parse_query("tag=a&tag=b")     -> {"tag": ["a", "b"]}
        parse_query("flag=")           -> {"flag": ""}
    """
    if isinstance(query_string, bytes):
        query_string = query_string.decode("latin-1")
    return collapse(parse_qs(query_string, keep_blank_values=True))
