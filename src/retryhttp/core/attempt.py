r"""Shared attempt bookkeeping for the synchronous and asynchronous
executors.

This module provides the ``AttemptOutcome`` tagged variant describing the
result of one send, and the ``AttemptState`` that accumulates outcomes
across the attempt loop and builds the terminal error.
"""

from __future__ import annotations

__all__ = ["AttemptOutcome", "AttemptState", "OutcomeKind", "is_success_status"]

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from retryhttp.core.classify import classify_exception
from retryhttp.exceptions import HttpErrorKind, RequestFailedError
from retryhttp.utils.structured_logging import log_structured

if TYPE_CHECKING:
    import httpx

logger: logging.Logger = logging.getLogger(__name__)


def is_success_status(status_code: int) -> bool:
    """Indicate if a status code is a success (2xx).

    Example:
        ```pycon
        >>> from retryhttp.core.attempt import is_success_status
        >>> is_success_status(204)
        True
        >>> is_success_status(304)
        False

        ```
    """
    return 200 <= status_code <= 299


class OutcomeKind(Enum):
    r"""The three possible results of one attempt."""

    SUCCESS = "success"
    TRANSPORT_FAILURE = "transport_failure"
    NON_SUCCESS_STATUS = "non_success_status"


@dataclass(frozen=True)
class AttemptOutcome:
    """The result of one attempt.

    Attributes:
        kind: The outcome tag.
        response: The response, for ``SUCCESS`` and ``NON_SUCCESS_STATUS``.
        error: The transport exception, for ``TRANSPORT_FAILURE``.
        error_kind: The classification of ``error``, if it could be
            classified.
    """

    kind: OutcomeKind
    response: httpx.Response | None = None
    error: Exception | None = None
    error_kind: HttpErrorKind | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> AttemptOutcome:
        kind = (
            OutcomeKind.SUCCESS
            if is_success_status(response.status_code)
            else OutcomeKind.NON_SUCCESS_STATUS
        )
        return cls(kind=kind, response=response)

    @classmethod
    def from_exception(cls, exc: Exception) -> AttemptOutcome:
        return cls(
            kind=OutcomeKind.TRANSPORT_FAILURE,
            error=exc,
            error_kind=classify_exception(exc),
        )

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


@dataclass
class AttemptState:
    """Mutable state of one attempt loop.

    The last exception and the last response are tracked independently:
    a response received on an earlier attempt still provides the status
    code when later attempts fail at the transport level.

    Attributes:
        method: The HTTP method, used in messages.
        url: The requested URL, used in messages.
        max_attempts: The total number of attempts allowed.
        attempts: The number of attempts made so far.
        last_outcome: The outcome of the most recent attempt.
        last_error: The most recent transport exception.
        last_error_kind: The most recent classified error kind.
        last_response: The most recent response.
    """

    method: str
    url: str
    max_attempts: int
    attempts: int = 0
    last_outcome: AttemptOutcome | None = None
    last_error: Exception | None = None
    last_error_kind: HttpErrorKind | None = None
    last_response: httpx.Response | None = None

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    @property
    def last_status_code(self) -> int | None:
        if self.last_response is None:
            return None
        return self.last_response.status_code

    def record(self, outcome: AttemptOutcome) -> None:
        """Record the outcome of an attempt and count the attempt.

        Args:
            outcome: The outcome of the attempt that just finished.
        """
        self.attempts += 1
        self.last_outcome = outcome
        if outcome.error is not None:
            self.last_error = outcome.error
        if outcome.error_kind is not None:
            self.last_error_kind = outcome.error_kind
        if outcome.response is not None:
            self.last_response = outcome.response

        if outcome.kind is OutcomeKind.TRANSPORT_FAILURE:
            logger.debug(
                f"{self.method} request to {self.url} encountered {type(outcome.error).__name__} "
                f"on attempt {self.attempts}/{self.max_attempts}: {outcome.error}"
            )
        elif outcome.kind is OutcomeKind.NON_SUCCESS_STATUS:
            logger.debug(
                f"{self.method} request to {self.url} failed with status "
                f"{self.last_status_code} (attempt {self.attempts}/{self.max_attempts})"
            )
        elif self.attempts > 1:
            logger.debug(f"{self.method} request to {self.url} succeeded on attempt {self.attempts}")

    def _failure_message(self) -> str:
        prefix = f"{self.method} request to {self.url}"
        outcome = self.last_outcome
        if outcome is not None and outcome.kind is OutcomeKind.NON_SUCCESS_STATUS:
            return f"{prefix} failed with status {self.last_status_code} after {self.attempts} attempts"
        if outcome is not None and outcome.error_kind is HttpErrorKind.TIMEOUT:
            return f"{prefix} timed out ({self.attempts} attempts)"
        if self.last_error is not None:
            return f"{prefix} failed after {self.attempts} attempts: {self.last_error}"
        return f"{prefix} failed after {self.attempts} attempts"

    def to_error(self) -> RequestFailedError:
        """Build the terminal error raised when the attempts are exhausted.

        Returns:
            The error describing the last observed failure.
        """
        error = RequestFailedError(
            method=self.method,
            url=self.url,
            message=self._failure_message(),
            error_kind=self.last_error_kind or HttpErrorKind.UNKNOWN,
            cause=self.last_error,
            status_code=self.last_status_code,
            response=self.last_response,
            attempts=self.attempts,
        )
        log_structured(
            logger,
            logging.DEBUG,
            error.message,
            url=self.url,
            method=self.method,
            attempts=self.attempts,
            status_code=error.status_code,
            error_kind=error.error_kind.value,
        )
        return error
