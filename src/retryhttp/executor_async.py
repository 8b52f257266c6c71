r"""Asynchronous request executor with a fixed-interval retry loop.

This module provides the ``AsyncRequestExecutor`` class, the asyncio
counterpart of ``RequestExecutor``. Waits between attempts use
``asyncio.sleep`` so other tasks run while a request is backing off.
"""

from __future__ import annotations

__all__ = ["AsyncRequestExecutor"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from retryhttp.core.attempt import AttemptOutcome, AttemptState
from retryhttp.core.message import build_client_kwargs, build_request
from retryhttp.decode import DecodeTarget, decode_response_async
from retryhttp.options import CompletionOption

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from retryhttp.options import RequestOptions

logger: logging.Logger = logging.getLogger(__name__)


class _AsyncClientClosingStream(httpx.AsyncByteStream):
    r"""Response stream that closes the per-call async client with the
    response."""

    def __init__(self, stream: httpx.AsyncByteStream, client: httpx.AsyncClient) -> None:
        self._stream = stream
        self._client = client

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for chunk in self._stream:
            yield chunk

    async def aclose(self) -> None:
        try:
            await self._stream.aclose()
        finally:
            await self._client.aclose()


class AsyncRequestExecutor:
    """Executes async HTTP requests with a fixed-interval retry policy.

    Every call to ``execute`` creates its own ``httpx.AsyncClient`` and
    its own outgoing request. Attempts run strictly one after the other;
    before each one the executor suspends for ``options.retry_interval``
    seconds. Per-attempt timeouts are enforced by the client, and a
    timed-out attempt consumes one retry like any other failure. No
    cancellation token is used: cancelling the awaiting task cancels the
    loop at its current ``await``.

    Args:
        transport: Optional transport used by the per-call clients.
        development_mode: If ``True``, server certificates are not
            validated. Only meant for development environments.
        sleep: Optional coroutine function used to wait between attempts.
            Defaults to ``asyncio.sleep``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retryhttp import AsyncRequestExecutor, RequestOptions
        >>> async def main():
        ...     options = RequestOptions(url="https://api.example.com/data", method="GET")
        ...     response = await AsyncRequestExecutor().execute(options)
        ...     await response.aclose()
        ...     return response.status_code
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        development_mode: bool = False,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        self.transport = transport
        self.development_mode = development_mode
        self._sleep = sleep

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(development_mode={self.development_mode})"

    async def execute(
        self,
        options: RequestOptions,
        completion: CompletionOption = CompletionOption.CONTENT_READ,
    ) -> httpx.Response:
        """Send the request, retrying until success or exhaustion.

        Args:
            options: The request description and retry policy.
            completion: ``CONTENT_READ`` to buffer the body before
                returning, ``HEADERS_READ`` to stream it.

        Returns:
            The first response with a 2xx status. The caller owns it and
            must close it with ``aclose()``; in ``HEADERS_READ`` mode this
            also closes the underlying client.

        Raises:
            RequestFailedError: If all the attempts fail.
        """
        client = httpx.AsyncClient(
            **build_client_kwargs(
                options, development_mode=self.development_mode, transport=self.transport
            )
        )
        owns_client = True
        try:
            request = build_request(client, options)
            response = await self._run_attempts(client, request, options, completion)
            if completion is CompletionOption.HEADERS_READ:
                response.stream = _AsyncClientClosingStream(response.stream, client)
                owns_client = False
            return response
        finally:
            if owns_client:
                await client.aclose()

    async def _run_attempts(
        self,
        client: httpx.AsyncClient,
        request: httpx.Request,
        options: RequestOptions,
        completion: CompletionOption,
    ) -> httpx.Response:
        state = AttemptState(
            method=request.method, url=str(request.url), max_attempts=options.max_attempts
        )
        stream = completion is CompletionOption.HEADERS_READ
        while not state.exhausted:
            logger.debug(
                f"Waiting {options.retry_interval:.2f}s before attempt "
                f"{state.attempts + 1}/{state.max_attempts}"
            )
            await (self._sleep or asyncio.sleep)(options.retry_interval)
            if state.attempts:
                # Rebuilt so cookies stored by earlier responses are sent
                request = build_request(client, options)
            try:
                outcome = AttemptOutcome.from_response(await client.send(request, stream=stream))
            except httpx.RequestError as exc:
                outcome = AttemptOutcome.from_exception(exc)
            state.record(outcome)

            if outcome.is_success:
                return outcome.response
            if outcome.response is not None:
                await outcome.response.aclose()

        raise state.to_error() from state.last_error

    async def execute_typed(
        self, options: RequestOptions, result_type: Any = DecodeTarget.TEXT
    ) -> Any:
        """Send the request and decode the response body.

        Args:
            options: The request description and retry policy.
            result_type: A ``DecodeTarget`` or the type to decode into.

        Returns:
            The decoded body. For ``DecodeTarget.STREAM``, an async
            iterator of bytes which closes the response once exhausted.

        Raises:
            RequestFailedError: If all the attempts fail.
            DecodeError: If the body cannot be read or converted.
        """
        if result_type is DecodeTarget.STREAM:
            response = await self.execute(options, CompletionOption.HEADERS_READ)
            return await decode_response_async(
                response, result_type, options.response_content_type
            )
        response = await self.execute(options)
        try:
            return await decode_response_async(
                response, result_type, options.response_content_type
            )
        finally:
            await response.aclose()
