"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from velix.http.cors import CORSConfig


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, cors=CORSConfig(credentials=True))
    """

    # Include the exception class name in 500 JSON bodies
    debug: bool = False

    # Plain-text body for unmatched requests
    not_found_body: str = "Not Found"

    # Limits (enforced by the ASGI transport)
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # Applied to the "velix" logger at freeze time; None leaves it alone
    log_level: str | None = None

    # When set, CORSMiddleware is installed as the outermost middleware
    cors: CORSConfig | None = None
