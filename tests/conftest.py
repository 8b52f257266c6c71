from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import Generator


class SequenceHandler:
    """Request handler for ``httpx.MockTransport`` replaying a sequence of
    outcomes.

    Each outcome is either a status code, answered with ``content`` and
    ``headers``, or an exception to raise. The last outcome is repeated
    once the sequence is exhausted.
    """

    def __init__(
        self,
        *outcomes: int | Exception,
        content: bytes = b"",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.outcomes = list(outcomes) or [200]
        self.content = content
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes[min(len(self.requests), len(self.outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, content=self.content, headers=self.headers)


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", new_callable=AsyncMock) as mock:
        yield mock


@pytest.fixture
def sleep() -> Mock:
    """Create a sleep function recording the requested delays."""
    return Mock(return_value=None)


@pytest.fixture
def asleep() -> AsyncMock:
    """Create an async sleep function recording the requested delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def ok_handler() -> SequenceHandler:
    return SequenceHandler(200, content=b"ok")


@pytest.fixture
def make_handler() -> type[SequenceHandler]:
    """Give tests access to ``SequenceHandler`` without importing the
    conftest module."""
    return SequenceHandler
