"""Test utilities for velix applications.

Provides a synchronous test client and response assertions::

    from velix.testing import TestClient, assert_json
"""

from velix.testing.assertions import (
    assert_error,
    assert_header,
    assert_json,
    assert_not_found,
    assert_status,
)
from velix.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_error",
    "assert_header",
    "assert_json",
    "assert_not_found",
    "assert_status",
]
