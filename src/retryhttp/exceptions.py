r"""Exception types raised by the request executor and the response
decoder."""

from __future__ import annotations

__all__ = ["DecodeError", "HttpErrorKind", "RequestFailedError", "RetryHttpError"]

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class HttpErrorKind(str, Enum):
    r"""Best-effort classification of a transport-level failure."""

    UNKNOWN = "unknown"
    NAME_RESOLUTION_ERROR = "name_resolution_error"
    CONNECTION_ERROR = "connection_error"
    SECURE_CONNECTION_ERROR = "secure_connection_error"
    HTTP_PROTOCOL_ERROR = "http_protocol_error"
    PROXY_TUNNEL_ERROR = "proxy_tunnel_error"
    INVALID_RESPONSE = "invalid_response"
    RESPONSE_ENDED = "response_ended"
    CONFIGURATION_LIMIT_EXCEEDED = "configuration_limit_exceeded"
    TIMEOUT = "timeout"


class RetryHttpError(Exception):
    r"""Base class of all the errors raised by ``retryhttp``.

    Args:
        message: A human-readable description of the failure.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RequestFailedError(RetryHttpError):
    r"""Raised when every attempt is used without a successful status.

    Args:
        method: The HTTP method of the request.
        url: The requested URL.
        message: A human-readable description of the failure.
        error_kind: The classified kind of the last transport error, or
            ``HttpErrorKind.UNKNOWN`` if none could be classified.
        cause: The last exception raised by the transport, if any.
        status_code: The status code of the last response, if any.
        response: The last response received, if any. It is already
            closed.
        attempts: The number of attempts that were made.

    Example:
        ```pycon
        >>> from retryhttp import HttpErrorKind, RequestFailedError
        >>> error = RequestFailedError(
        ...     method="GET",
        ...     url="https://api.example.com",
        ...     message="GET request to https://api.example.com failed after 4 attempts",
        ...     status_code=503,
        ... )
        >>> error.error_kind
        <HttpErrorKind.UNKNOWN: 'unknown'>
        >>> error.status_code
        503

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        *,
        error_kind: HttpErrorKind = HttpErrorKind.UNKNOWN,
        cause: BaseException | None = None,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.error_kind = error_kind
        self.cause = cause
        self.status_code = status_code
        self.response = response
        self.attempts = attempts

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"error_kind={self.error_kind.value!r}, status_code={self.status_code}, "
            f"attempts={self.attempts})"
        )


class DecodeError(RetryHttpError):
    r"""Raised when a successful response cannot be read or converted.

    Read failures and parse or conversion failures are reported the same
    way; inspect ``cause`` to tell them apart.

    Args:
        message: A human-readable description of the failure.
        cause: The underlying exception.
        status_code: The status code of the decoded response.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.status_code = status_code
