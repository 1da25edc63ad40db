"""Response assertion helpers for arbor tests.

Each assertion produces a clear error message on failure.
"""

from arbor.testing.client import TestResponse


def assert_status(response: TestResponse, status: int) -> None:
    """Assert the response has *status*, showing the body otherwise."""
    assert response.status == status, (
        f"Expected status {status}, got {response.status}.\n"
        f"Response body: {response.text[:500]}"
    )


def assert_header(response: TestResponse, name: str, value: str | None = None) -> None:
    """Assert header *name* is present, and equals *value* when given."""
    actual = response.header(name)
    assert actual is not None, (
        f"Expected header {name!r}, got {[key for key, _ in response.headers]}"
    )
    if value is not None:
        assert actual == value, f"Expected {name}: {value!r}, got {actual!r}"


def assert_no_header(response: TestResponse, name: str) -> None:
    """Assert header *name* is absent."""
    actual = response.header(name)
    assert actual is None, f"Unexpected header {name}: {actual!r}"
