"""Form body decoding — URL-encoded and multipart.

URL-encoded forms use stdlib ``urllib.parse``. ``python-multipart`` is an
optional dependency (``pip install velix[forms]``) used only for
``multipart/form-data`` bodies.

Fields collapse the same way query strings do: one value maps to a
string, repeated fields map to a list. Uploaded files are returned
separately, keyed by field name.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

from velix.errors import ConfigurationError
from velix.http.query import QueryValue, collapse

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class UploadFile:
    """An uploaded file from a multipart form submission.

    The content is held in memory as bytes, suitable for typical web
    uploads bounded by ``AppConfig.max_content_length``.
    """

    filename: str
    content_type: str
    size: int
    _content: bytes

    def read(self) -> bytes:
        """Return the file content as bytes."""
        return self._content

    def save(self, path: Path) -> None:
        """Write the file content to disk.

        Args:
            path: Destination file path. Parent directories must exist.
        """
        path.write_bytes(self._content)

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


type FormFields = dict[str, QueryValue]
type FormFiles = dict[str, UploadFile]


def is_form(content_type: str | None) -> bool:
    """True if *content_type* names a form encoding this module decodes."""
    return _media_type(content_type) in (FORM_URLENCODED, MULTIPART)


def _media_type(content_type: str | None) -> str:
    return (content_type or "").lower().split(";")[0].strip()


def parse_form_data(body: bytes, content_type: str) -> tuple[FormFields, FormFiles]:
    """Parse a form body into ``(fields, files)``.

    Supports:
    - ``application/x-www-form-urlencoded`` (stdlib, no extra dependency)
    - ``multipart/form-data`` (requires ``python-multipart``)

    Raises:
        ConfigurationError: If multipart parsing is needed but
            ``python-multipart`` is not installed.
        ValueError: If the content type is not a supported form encoding,
            or a multipart body has no boundary.
    """
    media_type = _media_type(content_type)

    if media_type == FORM_URLENCODED:
        return _parse_urlencoded(body), {}

    if media_type == MULTIPART:
        return _parse_multipart(body, content_type)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_urlencoded(body: bytes) -> FormFields:
    parsed = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
    return collapse(parsed)


def _parse_multipart(body: bytes, content_type: str) -> tuple[FormFields, FormFiles]:
    """Parse multipart form data using python-multipart."""
    try:
        from python_multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install velix[forms]"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    fields: dict[str, list[str]] = {}
    files: FormFiles = {}

    # Per-part state, reset in on_part_begin
    part_headers: dict[str, str] = {}
    header_field = bytearray()
    header_value = bytearray()
    part_data = bytearray()

    def on_part_begin() -> None:
        part_headers.clear()
        part_data.clear()

    def on_header_field(data: bytes, start: int, end: int) -> None:
        header_field.extend(data[start:end])

    def on_header_value(data: bytes, start: int, end: int) -> None:
        header_value.extend(data[start:end])

    def on_header_end() -> None:
        part_headers[header_field.decode("latin-1").lower()] = header_value.decode("latin-1")
        header_field.clear()
        header_value.clear()

    def on_part_data(data: bytes, start: int, end: int) -> None:
        part_data.extend(data[start:end])

    def on_part_end() -> None:
        disposition = part_headers.get("content-disposition")
        if disposition is None:
            return
        _, params = parse_options_header(disposition)
        name = params.get(b"name")
        if name is None:
            return
        field_name = name.decode("utf-8")
        filename = params.get(b"filename")

        if filename is not None:
            content = bytes(part_data)
            files[field_name] = UploadFile(
                filename=filename.decode("utf-8"),
                content_type=part_headers.get("content-type", "application/octet-stream"),
                size=len(content),
                _content=content,
            )
        else:
            value = part_data.decode("utf-8", errors="replace")
            fields.setdefault(field_name, []).append(value)

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return collapse(fields), files
