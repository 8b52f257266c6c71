r"""Unit tests for package initialization and metadata."""

from __future__ import annotations

import retryhttp


def test_package_version_is_string() -> None:
    """Test that __version__ is a string."""
    assert isinstance(retryhttp.__version__, str)


def test_package_version_format() -> None:
    """Test that __version__ follows semantic versioning."""
    assert "." in retryhttp.__version__


def test_all_exports_defined() -> None:
    """Test that all items in __all__ are defined in the module."""
    for name in retryhttp.__all__:
        assert hasattr(retryhttp, name), f"{name} is in __all__ but not defined in module"


def test_all_exports_count() -> None:
    """Test that __all__ has the expected number of exports."""
    # 2 config constants + 4 error types + 3 option/decode enums and classes
    # + 2 executors + 6 functions + 1 version = 18
    assert len(retryhttp.__all__) == len(set(retryhttp.__all__)) == 18


def test_constants_are_immutable_types() -> None:
    assert isinstance(retryhttp.DEFAULT_RETRY_COUNT, int)
    assert isinstance(retryhttp.DEFAULT_RETRY_INTERVAL, float)


def test_exceptions_share_base_class() -> None:
    assert issubclass(retryhttp.RequestFailedError, retryhttp.RetryHttpError)
    assert issubclass(retryhttp.DecodeError, retryhttp.RetryHttpError)
    assert issubclass(retryhttp.RetryHttpError, Exception)
