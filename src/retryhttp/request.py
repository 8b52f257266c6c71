r"""Contains synchronous functions to execute a request described by
``RequestOptions`` with automatic retry logic."""

from __future__ import annotations

__all__ = ["execute", "execute_typed"]

from typing import TYPE_CHECKING, Any

from retryhttp.decode import DecodeTarget
from retryhttp.executor import RequestExecutor
from retryhttp.options import CompletionOption

if TYPE_CHECKING:
    import httpx

    from retryhttp.options import RequestOptions


def execute(
    options: RequestOptions,
    *,
    completion: CompletionOption = CompletionOption.CONTENT_READ,
    transport: httpx.BaseTransport | None = None,
    development_mode: bool = False,
) -> httpx.Response:
    r"""Send a request with a fixed-interval retry policy.

    The request is attempted up to ``options.retry_count + 1`` times, each
    attempt preceded by a wait of ``options.retry_interval`` seconds,
    until the server answers with a 2xx status.

    Args:
        options: The request description and retry policy.
        completion: ``CONTENT_READ`` to buffer the body before returning,
            ``HEADERS_READ`` to stream it.
        transport: Optional transport to send the request with.
        development_mode: If ``True``, server certificates are not
            validated.

    Returns:
        The successful response. The caller must close it.

    Raises:
        RequestFailedError: If all the attempts fail.

    Example:
        ```pycon
        >>> from retryhttp import RequestOptions, execute
        >>> options = RequestOptions(
        ...     url="https://api.example.com/data",
        ...     method="GET",
        ...     retry_count=5,
        ...     retry_interval=0.5,
        ... )
        >>> response = execute(options)  # doctest: +SKIP
        >>> response.close()  # doctest: +SKIP

        ```
    """
    executor = RequestExecutor(transport=transport, development_mode=development_mode)
    return executor.execute(options, completion)


def execute_typed(
    options: RequestOptions,
    result_type: Any = DecodeTarget.TEXT,
    *,
    transport: httpx.BaseTransport | None = None,
    development_mode: bool = False,
) -> Any:
    r"""Send a request with a fixed-interval retry policy and decode the
    response body.

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

    Example:
        ```pycon
        >>> from retryhttp import RequestOptions, execute_typed
        >>> options = RequestOptions(
        ...     url="https://api.example.com/count",
        ...     method="GET",
        ...     response_content_type="application/json",
        ... )
        >>> count = execute_typed(options, int)  # doctest: +SKIP

        ```
    """
    executor = RequestExecutor(transport=transport, development_mode=development_mode)
    return executor.execute_typed(options, result_type)
