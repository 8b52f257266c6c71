"""Unit tests for the asynchronous request functions."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, call, patch

import httpx
import pytest
from pydantic import BaseModel

from retryhttp import (
    CompletionOption,
    RequestFailedError,
    RequestOptions,
    execute_async,
    execute_typed_async,
)

if TYPE_CHECKING:
    from unittest.mock import Mock

TEST_URL = "https://api.example.com/data"


class Item(BaseModel):
    a: int


###################################
#     Tests for execute_async     #
###################################


@pytest.mark.asyncio
async def test_execute_async_successful_request(ok_handler: Mock, mock_asleep: Mock) -> None:
    response = await execute_async(
        RequestOptions(url=TEST_URL, method="GET"), transport=httpx.MockTransport(ok_handler)
    )

    assert response.status_code == 200
    assert response.text == "ok"
    mock_asleep.assert_awaited_once_with(1.0)


@pytest.mark.asyncio
async def test_execute_async_exhausts_attempts(make_handler: type, mock_asleep: Mock) -> None:
    handler = make_handler(httpx.ConnectError("Connection refused"))

    with pytest.raises(RequestFailedError, match=r"failed after 2 attempts"):
        await execute_async(
            RequestOptions(url=TEST_URL, retry_count=1, retry_interval=2.0),
            transport=httpx.MockTransport(handler),
        )

    assert handler.call_count == 2
    assert mock_asleep.await_args_list == [call(2.0), call(2.0)]


@pytest.mark.asyncio
async def test_execute_async_forwards_arguments(mock_asleep: Mock) -> None:
    options = RequestOptions(url=TEST_URL)
    with patch("retryhttp.request_async.AsyncRequestExecutor") as executor_cls:
        executor_cls.return_value.execute = AsyncMock()
        await execute_async(options, completion=CompletionOption.HEADERS_READ)

    executor_cls.assert_called_once_with(transport=None, development_mode=False)
    executor_cls.return_value.execute.assert_awaited_once_with(
        options, CompletionOption.HEADERS_READ
    )


#########################################
#     Tests for execute_typed_async     #
#########################################


@pytest.mark.asyncio
async def test_execute_typed_async_text(make_handler: type, mock_asleep: Mock) -> None:
    result = await execute_typed_async(
        RequestOptions(url=TEST_URL),
        transport=httpx.MockTransport(make_handler(200, content=b"exact body")),
    )
    assert result == "exact body"


@pytest.mark.asyncio
async def test_execute_typed_async_xml(make_handler: type, mock_asleep: Mock) -> None:
    handler = make_handler(503, 200, content=b"<Item><a>5</a></Item>")

    result = await execute_typed_async(
        RequestOptions(url=TEST_URL, response_content_type="text/xml"),
        Item,
        transport=httpx.MockTransport(handler),
    )

    assert result == Item(a=5)
    assert handler.call_count == 2
