"""Test utilities for arbor route trees.

Provides an in-process ASGI test client and response assertions::

    from arbor.testing import TestClient, assert_status
"""

from arbor.testing.assertions import assert_header, assert_no_header, assert_status
from arbor.testing.client import TestClient, TestResponse

__all__ = [
    "TestClient",
    "TestResponse",
    "assert_header",
    "assert_no_header",
    "assert_status",
]
