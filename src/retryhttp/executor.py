r"""Synchronous request executor with a fixed-interval retry loop.

This module provides the ``RequestExecutor`` class that sends the request
described by a ``RequestOptions`` through a per-call ``httpx.Client``,
retries on transport failures and non-success statuses, and optionally
decodes the response body.
"""

from __future__ import annotations

__all__ = ["RequestExecutor"]

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from retryhttp.core.attempt import AttemptOutcome, AttemptState
from retryhttp.core.message import build_client_kwargs, build_request
from retryhttp.decode import DecodeTarget, decode_response
from retryhttp.options import CompletionOption

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from retryhttp.options import RequestOptions

logger: logging.Logger = logging.getLogger(__name__)


class _ClientClosingStream(httpx.SyncByteStream):
    r"""Response stream that closes the per-call client with the
    response."""

    def __init__(self, stream: httpx.SyncByteStream, client: httpx.Client) -> None:
        self._stream = stream
        self._client = client

    def __iter__(self) -> Iterator[bytes]:
        yield from self._stream

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            self._client.close()


class RequestExecutor:
    """Executes HTTP requests with a fixed-interval retry policy.

    Every call to ``execute`` creates its own ``httpx.Client`` and its own
    outgoing request, so one executor can be shared freely. Attempts run
    strictly one after the other, each preceded by a wait of
    ``options.retry_interval`` seconds, until a 2xx response is received
    or ``options.retry_count + 1`` attempts were made. Transport errors
    and non-success statuses are retried the same way.

    Args:
        transport: Optional transport used by the per-call clients.
        development_mode: If ``True``, server certificates are not
            validated. Only meant for development environments.
        sleep: Optional function used to wait between attempts.
            Defaults to ``time.sleep``.

    Example:
        ```pycon
        >>> from retryhttp import RequestExecutor, RequestOptions
        >>> executor = RequestExecutor()
        >>> options = RequestOptions(url="https://api.example.com/data", method="GET")
        >>> response = executor.execute(options)  # doctest: +SKIP
        >>> response.close()  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *,
        transport: httpx.BaseTransport | None = None,
        development_mode: bool = False,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.transport = transport
        self.development_mode = development_mode
        self._sleep = sleep

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(development_mode={self.development_mode})"

    def execute(
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
            must close it; in ``HEADERS_READ`` mode closing the response
            also closes the underlying client.

        Raises:
            RequestFailedError: If all the attempts fail.
        """
        client = httpx.Client(
            **build_client_kwargs(
                options, development_mode=self.development_mode, transport=self.transport
            )
        )
        owns_client = True
        try:
            request = build_request(client, options)
            response = self._run_attempts(client, request, options, completion)
            if completion is CompletionOption.HEADERS_READ:
                response.stream = _ClientClosingStream(response.stream, client)
                owns_client = False
            return response
        finally:
            if owns_client:
                client.close()

    def _run_attempts(
        self,
        client: httpx.Client,
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
            (self._sleep or time.sleep)(options.retry_interval)
            if state.attempts:
                # Rebuilt so cookies stored by earlier responses are sent
                request = build_request(client, options)
            try:
                outcome = AttemptOutcome.from_response(client.send(request, stream=stream))
            except httpx.RequestError as exc:
                outcome = AttemptOutcome.from_exception(exc)
            state.record(outcome)

            if outcome.is_success:
                return outcome.response
            if outcome.response is not None:
                outcome.response.close()

        raise state.to_error() from state.last_error

    def execute_typed(self, options: RequestOptions, result_type: Any = DecodeTarget.TEXT) -> Any:
        """Send the request and decode the response body.

        The body is decoded once, after the retry loop succeeded. Decode
        failures are not retried.

        Args:
            options: The request description and retry policy.
                ``options.response_content_type`` selects the decoding of
                structured results.
            result_type: A ``DecodeTarget`` or the type to decode into.

        Returns:
            The decoded body. For ``DecodeTarget.STREAM``, an iterator of
            bytes which closes the response once exhausted.

        Raises:
            RequestFailedError: If all the attempts fail.
            DecodeError: If the body cannot be read or converted.

        Example:
            ```pycon
            >>> from pydantic import BaseModel
            >>> from retryhttp import RequestExecutor, RequestOptions
            >>> class Item(BaseModel):
            ...     id: int
            ...
            >>> options = RequestOptions(
            ...     url="https://api.example.com/items/1",
            ...     method="GET",
            ...     response_content_type="application/json",
            ... )
            >>> item = RequestExecutor().execute_typed(options, Item)  # doctest: +SKIP

            ```
        """
        if result_type is DecodeTarget.STREAM:
            response = self.execute(options, CompletionOption.HEADERS_READ)
            return decode_response(response, result_type, options.response_content_type)
        response = self.execute(options)
        try:
            return decode_response(response, result_type, options.response_content_type)
        finally:
            response.close()
