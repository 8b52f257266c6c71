r"""Classification of transport exceptions into ``HttpErrorKind``
values."""

from __future__ import annotations

__all__ = ["classify_exception"]

import socket
import ssl
from typing import TYPE_CHECKING

import httpx

from retryhttp.exceptions import HttpErrorKind

if TYPE_CHECKING:
    from collections.abc import Iterator

# Fragments found in the messages of DNS failures when the resolver error
# is not chained
_NAME_RESOLUTION_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


def _iter_causes(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _classify_connect_error(exc: httpx.ConnectError) -> HttpErrorKind:
    for err in _iter_causes(exc):
        if isinstance(err, ssl.SSLError):
            return HttpErrorKind.SECURE_CONNECTION_ERROR
        if isinstance(err, socket.gaierror):
            return HttpErrorKind.NAME_RESOLUTION_ERROR
    message = str(exc).lower()
    if "certificate" in message or "ssl" in message:
        return HttpErrorKind.SECURE_CONNECTION_ERROR
    if any(marker in message for marker in _NAME_RESOLUTION_MARKERS):
        return HttpErrorKind.NAME_RESOLUTION_ERROR
    return HttpErrorKind.CONNECTION_ERROR


def classify_exception(exc: BaseException) -> HttpErrorKind | None:
    """Classify a transport exception.

    Args:
        exc: The exception raised while sending a request.

    Returns:
        The error kind, ``HttpErrorKind.UNKNOWN`` for an httpx error with
        no finer kind, or ``None`` if the exception does not come from
        httpx.

    Example:
        ```pycon
        >>> import httpx
        >>> from retryhttp.core.classify import classify_exception
        >>> classify_exception(httpx.ReadTimeout("timed out"))
        <HttpErrorKind.TIMEOUT: 'timeout'>
        >>> classify_exception(httpx.ProxyError("tunnel refused"))
        <HttpErrorKind.PROXY_TUNNEL_ERROR: 'proxy_tunnel_error'>
        >>> classify_exception(ValueError("boom")) is None
        True

        ```
    """
    if not isinstance(exc, httpx.HTTPError):
        return None
    if isinstance(exc, httpx.TimeoutException):
        return HttpErrorKind.TIMEOUT
    if isinstance(exc, httpx.ProxyError):
        return HttpErrorKind.PROXY_TUNNEL_ERROR
    if isinstance(exc, httpx.ConnectError):
        return _classify_connect_error(exc)
    if isinstance(exc, httpx.ReadError):
        return HttpErrorKind.RESPONSE_ENDED
    if isinstance(exc, httpx.NetworkError):
        return HttpErrorKind.CONNECTION_ERROR
    if isinstance(exc, (httpx.RemoteProtocolError, httpx.DecodingError)):
        return HttpErrorKind.INVALID_RESPONSE
    if isinstance(exc, (httpx.LocalProtocolError, httpx.UnsupportedProtocol)):
        return HttpErrorKind.HTTP_PROTOCOL_ERROR
    if isinstance(exc, httpx.TooManyRedirects):
        return HttpErrorKind.CONFIGURATION_LIMIT_EXCEEDED
    return HttpErrorKind.UNKNOWN
