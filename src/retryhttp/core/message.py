r"""Assembly of the transport client settings and the outgoing request.

Both executors build their client and their outgoing requests with
these helpers. The request is rebuilt for each retry so it carries the
cookies stored so far.
"""

from __future__ import annotations

__all__ = ["build_client_kwargs", "build_headers", "build_request", "encode_content"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from retryhttp.options import RequestOptions

logger: logging.Logger = logging.getLogger(__name__)


def build_client_kwargs(
    options: RequestOptions,
    *,
    development_mode: bool = False,
    transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Build the keyword arguments used to create the per-call client.

    Redirects are always followed. Other settings are only included when
    the options override them, so the client keeps its own defaults.

    Args:
        options: The request options.
        development_mode: If ``True``, server certificates are not
            validated.
        transport: Optional transport to send the requests with.

    Returns:
        Keyword arguments for ``httpx.Client`` or ``httpx.AsyncClient``.

    Example:
        ```pycon
        >>> from retryhttp import RequestOptions
        >>> from retryhttp.core.message import build_client_kwargs
        >>> build_client_kwargs(RequestOptions(url="https://api.example.com", timeout=5.0))
        {'follow_redirects': True, 'timeout': 5.0}
        >>> build_client_kwargs(RequestOptions(url="https://api.example.com"), development_mode=True)
        {'follow_redirects': True, 'verify': False}

        ```
    """
    kwargs: dict[str, Any] = {"follow_redirects": True}
    if options.timeout is not None:
        kwargs["timeout"] = options.timeout
    if options.cookies is not None:
        # Handing the jar itself to the client keeps it shared by reference
        cookies = options.cookies
        kwargs["cookies"] = cookies.jar if isinstance(cookies, httpx.Cookies) else cookies
    if development_mode:
        logger.debug("Development mode: server certificate validation is disabled")
        kwargs["verify"] = False
    if transport is not None:
        kwargs["transport"] = transport
    return kwargs


def build_headers(options: RequestOptions) -> dict[str, str]:
    """Build the headers of the outgoing request.

    Args:
        options: The request options.

    Returns:
        A new dict with the caller headers plus the content type,
        ``Accept`` and ``Accept-Encoding`` headers derived from the
        options.

    Example:
        ```pycon
        >>> from retryhttp import RequestOptions
        >>> from retryhttp.core.message import build_headers
        >>> build_headers(
        ...     RequestOptions(
        ...         url="https://api.example.com",
        ...         content="<a/>",
        ...         request_content_type="text/xml",
        ...         encoding="utf-8",
        ...         response_content_type="application/json",
        ...     )
        ... )
        {'Content-Type': 'text/xml; charset=utf-8', 'Accept': 'application/json'}

        ```
    """
    headers = dict(options.headers)
    lowered = {key.lower(): key for key in headers}

    if options.has_body and options.request_content_type:
        content_type = options.request_content_type
        if options.encoding:
            content_type = f"{content_type}; charset={options.encoding}"
        headers[lowered.get("content-type", "Content-Type")] = content_type

    if options.response_content_type:
        accept_key = lowered.get("accept", "Accept")
        existing = headers.get(accept_key)
        headers[accept_key] = (
            f"{existing}, {options.response_content_type}"
            if existing
            else options.response_content_type
        )

    if options.decompression is False:
        headers[lowered.get("accept-encoding", "Accept-Encoding")] = "identity"
    return headers


def encode_content(options: RequestOptions) -> bytes | None:
    """Encode the raw request body.

    Args:
        options: The request options.

    Returns:
        The body as bytes, or ``None`` if the options have no raw body.
        A ``str`` body is encoded with ``options.encoding`` or UTF-8.
    """
    if isinstance(options.content, str):
        return options.content.encode(options.encoding or "utf-8")
    return options.content


def build_request(client: httpx.Client | httpx.AsyncClient, options: RequestOptions) -> httpx.Request:
    """Build the outgoing request of one attempt.

    Args:
        client: The per-call client. Its default headers and cookies are
            merged into the request.
        options: The request options.

    Returns:
        The request to send.
    """
    return client.build_request(
        options.method.upper(),
        options.url,
        params=options.params,
        headers=build_headers(options),
        content=encode_content(options),
        json=options.json,
    )
