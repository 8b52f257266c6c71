r"""Parameter validation utilities for request options.

This module provides validation functions that check the retry policy
and the transport settings before a request is executed.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout"]


def validate_timeout(timeout: float | None) -> None:
    """Validate the timeout parameter.

    Args:
        timeout: Maximum seconds to wait for each attempt. ``None`` keeps
            the transport default. Must be > 0 if provided.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from retryhttp.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(None)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout is not None and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(retry_count: int, retry_interval: float) -> None:
    """Validate the retry policy.

    Args:
        retry_count: Number of retries after the first attempt.
            Must be >= 0. A value of 0 means a single attempt.
        retry_interval: Fixed delay in seconds before every attempt.
            Must be > 0.

    Raises:
        ValueError: If retry_count is negative or retry_interval is not
            positive.

    Example:
        ```pycon
        >>> from retryhttp.core.validation import validate_retry_params
        >>> validate_retry_params(retry_count=3, retry_interval=1.0)
        >>> validate_retry_params(retry_count=-1, retry_interval=1.0)  # doctest: +SKIP

        ```
    """
    if retry_count < 0:
        msg = f"retry_count must be >= 0, got {retry_count}"
        raise ValueError(msg)
    if retry_interval <= 0:
        msg = f"retry_interval must be > 0, got {retry_interval}"
        raise ValueError(msg)
