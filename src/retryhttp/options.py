r"""Declarative description of one logical HTTP request.

This module provides the ``RequestOptions`` dataclass consumed by the
request executors, and the ``CompletionOption`` enum that controls when a
send returns.
"""

from __future__ import annotations

__all__ = ["CompletionOption", "RequestOptions"]

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from retryhttp.core.config import DEFAULT_METHOD, DEFAULT_RETRY_COUNT, DEFAULT_RETRY_INTERVAL
from retryhttp.core.validation import validate_retry_params, validate_timeout

if TYPE_CHECKING:
    from collections.abc import Mapping
    from http.cookiejar import CookieJar

    import httpx


class CompletionOption(Enum):
    r"""When a send returns to the attempt loop.

    ``CONTENT_READ`` buffers the whole body before returning.
    ``HEADERS_READ`` returns as soon as the headers are read and leaves
    the body to be streamed by the caller.
    """

    CONTENT_READ = "content_read"
    HEADERS_READ = "headers_read"


@dataclass
class RequestOptions:
    """Everything needed to build and govern one logical request.

    The executors never mutate an instance. ``headers`` is a plain
    mutable dict so callers can keep adding to it between calls.

    Args:
        url: The URL to send the request to.
        method: The HTTP method. Defaults to ``POST``.
        params: Optional query parameters merged into the URL.
        headers: Request headers.
        content: Optional raw request body. A ``str`` body is encoded
            with ``encoding`` (UTF-8 if not set).
        json: Optional JSON-serializable request body. Cannot be combined
            with ``content``.
        request_content_type: Media type of the request body. Only applied
            when a body is present.
        encoding: Character set appended to the request content type.
        response_content_type: Expected media type of the response. It is
            sent as an ``Accept`` preference and selects how typed results
            are decoded.
        timeout: Per-attempt timeout in seconds. ``None`` keeps the
            transport default. Must be > 0 if provided.
        decompression: ``None`` keeps the transport default, ``False``
            asks the server for an uncompressed body, ``True`` accepts any
            encoding the transport can decompress.
        cookies: Optional cookie store shared by reference. Cookies set by
            responses are stored in it.
        retry_count: Number of retries after the first attempt. Must be
            >= 0.
        retry_interval: Fixed delay in seconds before every attempt.
            Must be > 0.

    Example:
        ```pycon
        >>> from retryhttp import RequestOptions
        >>> options = RequestOptions(url="https://api.example.com/data", method="GET")
        >>> options.retry_count
        3
        >>> options.retry_interval
        1.0
        >>> faster = options.merge(retry_interval=0.1)
        >>> faster.retry_interval
        0.1
        >>> options.retry_interval  # Unchanged
        1.0

        ```
    """

    url: str | httpx.URL
    method: str = DEFAULT_METHOD
    params: Mapping[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes | str | None = None
    json: Any = None
    request_content_type: str | None = None
    encoding: str | None = None
    response_content_type: str | None = None
    timeout: float | None = None
    decompression: bool | None = None
    cookies: CookieJar | httpx.Cookies | None = None
    retry_count: int = DEFAULT_RETRY_COUNT
    retry_interval: float = DEFAULT_RETRY_INTERVAL

    def __post_init__(self) -> None:
        """Validate the options after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        if not str(self.url):
            msg = "url must not be empty"
            raise ValueError(msg)
        if not self.method:
            msg = "method must not be empty"
            raise ValueError(msg)
        if self.content is not None and self.json is not None:
            msg = "content and json cannot be used together"
            raise ValueError(msg)
        validate_timeout(self.timeout)
        validate_retry_params(retry_count=self.retry_count, retry_interval=self.retry_interval)

    @property
    def has_body(self) -> bool:
        r"""``True`` if the request carries a body."""
        return self.content is not None or self.json is not None

    @property
    def max_attempts(self) -> int:
        r"""The total number of attempts allowed by the retry policy."""
        return self.retry_count + 1

    def merge(self, **overrides: Any) -> RequestOptions:
        """Create new options with the specified fields overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for the fields to override.

        Returns:
            A new ``RequestOptions`` instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
