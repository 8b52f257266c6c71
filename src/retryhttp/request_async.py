r"""Contains asynchronous functions to execute a request described by
``RequestOptions`` with automatic retry logic."""

from __future__ import annotations

__all__ = ["execute_async", "execute_typed_async"]

from typing import TYPE_CHECKING, Any

from retryhttp.decode import DecodeTarget
from retryhttp.executor_async import AsyncRequestExecutor
from retryhttp.options import CompletionOption

if TYPE_CHECKING:
    import httpx

    from retryhttp.options import RequestOptions


async def execute_async(
    options: RequestOptions,
    *,
    completion: CompletionOption = CompletionOption.CONTENT_READ,
    transport: httpx.AsyncBaseTransport | None = None,
    development_mode: bool = False,
) -> httpx.Response:
    r"""Send an async request with a fixed-interval retry policy.

    Args:
        options: The request description and retry policy.
        completion: ``CONTENT_READ`` to buffer the body before returning,
            ``HEADERS_READ`` to stream it.
        transport: Optional transport to send the request with.
        development_mode: If ``True``, server certificates are not
            validated.

    Returns:
        The successful response. The caller must close it with
        ``aclose()``.

    Raises:
        RequestFailedError: If all the attempts fail.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retryhttp import RequestOptions, execute_async
        >>> async def example():
        ...     response = await execute_async(
        ...         RequestOptions(url="https://api.example.com/data", method="GET")
        ...     )
        ...     await response.aclose()
        ...     return response.status_code
        ...
        >>> asyncio.run(example())  # doctest: +SKIP

        ```
    """
    executor = AsyncRequestExecutor(transport=transport, development_mode=development_mode)
    return await executor.execute(options, completion)


async def execute_typed_async(
    options: RequestOptions,
    result_type: Any = DecodeTarget.TEXT,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    development_mode: bool = False,
) -> Any:
    r"""Send an async request with a fixed-interval retry policy and
    decode the response body.

    Args:
        options: The request description and retry policy.
        result_type: A ``DecodeTarget`` or the type to decode into.
        transport: Optional transport to send the request with.
        development_mode: If ``True``, server certificates are not
            validated.

    Returns:
        The decoded body.

    Raises:
        RequestFailedError: If all the attempts fail.
        DecodeError: If the body cannot be read or converted.
    """
    executor = AsyncRequestExecutor(transport=transport, development_mode=development_mode)
    return await executor.execute_typed(options, result_type)
