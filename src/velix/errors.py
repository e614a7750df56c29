"""Velix exception hierarchy.

Shared across Router, App, Response, and the middleware pipeline so
every module raises and catches the same types.
"""


class VelixError(Exception):
    """Base for all velix-specific errors."""


class ConfigurationError(VelixError):
    """Raised when app configuration is invalid.

    Typically raised during route registration (bad templates, duplicate
    placeholder names) or when registering after the app has frozen.
    """


class ResponseAlreadySent(VelixError):  # noqa: N818
    """A terminal or mutating call was made on an emitted Response.

    Every request emits exactly once. The second ``send()`` (or
    ``json()``, ``text()``, ``redirect()``) and any later ``status()``
    or ``header()`` call raise this instead of emitting again.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot call {operation}(): response was already sent.")


class PipelineError(VelixError):
    """A middleware continuation was invoked more than once."""
