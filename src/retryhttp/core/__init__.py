r"""Core shared logic for the sync and async request executors.

This package contains the default configuration values, parameter
validation, request assembly, transport error classification and the
attempt bookkeeping shared by both executors.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_METHOD",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_INTERVAL",
    "AttemptOutcome",
    "AttemptState",
    "OutcomeKind",
    "build_client_kwargs",
    "build_request",
    "classify_exception",
    "validate_retry_params",
    "validate_timeout",
]

from retryhttp.core.attempt import AttemptOutcome, AttemptState, OutcomeKind
from retryhttp.core.classify import classify_exception
from retryhttp.core.config import DEFAULT_METHOD, DEFAULT_RETRY_COUNT, DEFAULT_RETRY_INTERVAL
from retryhttp.core.message import build_client_kwargs, build_request
from retryhttp.core.validation import validate_retry_params, validate_timeout
