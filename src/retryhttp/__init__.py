r"""retryhttp - HTTP request executor with a fixed-interval retry policy.

This package sends a request described declaratively by
``RequestOptions``, retries it at a fixed interval on transport failures
and non-success statuses, and materializes the response body as text,
bytes, a byte stream, or an object decoded from JSON or XML. It is built
on top of the httpx library and validates structured results with
pydantic.

Key Features:
    - Bounded retry loop: ``retry_count + 1`` attempts, each preceded by a
      fixed ``retry_interval`` wait
    - Uniform retry of transport errors and non-2xx statuses
    - Best-effort classification of transport errors (``HttpErrorKind``)
    - Typed results decoded according to the declared response content type
    - Synchronous and asynchronous executors
    - Per-call clients with optional shared cookie jar

Example:
    ```pycon
    >>> from pydantic import BaseModel
    >>> from retryhttp import RequestOptions, execute_typed
    >>> class User(BaseModel):
    ...     id: int
    ...     name: str
    ...
    >>> options = RequestOptions(
    ...     url="https://api.example.com/users/1",
    ...     method="GET",
    ...     response_content_type="application/json",
    ...     retry_count=2,
    ...     retry_interval=0.5,
    ... )
    >>> user = execute_typed(options, User)  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRequestExecutor",
    "CompletionOption",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_INTERVAL",
    "DecodeError",
    "DecodeTarget",
    "HttpErrorKind",
    "RequestExecutor",
    "RequestFailedError",
    "RequestOptions",
    "RetryHttpError",
    "__version__",
    "decode_response",
    "decode_response_async",
    "execute",
    "execute_async",
    "execute_typed",
    "execute_typed_async",
]

from importlib.metadata import PackageNotFoundError, version

from retryhttp.core.config import DEFAULT_RETRY_COUNT, DEFAULT_RETRY_INTERVAL
from retryhttp.decode import DecodeTarget, decode_response, decode_response_async
from retryhttp.exceptions import DecodeError, HttpErrorKind, RequestFailedError, RetryHttpError
from retryhttp.executor import RequestExecutor
from retryhttp.executor_async import AsyncRequestExecutor
from retryhttp.options import CompletionOption, RequestOptions
from retryhttp.request import execute, execute_typed
from retryhttp.request_async import execute_async, execute_typed_async

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
