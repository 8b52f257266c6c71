from __future__ import annotations

import asyncio
import json
import logging
from datetime import timedelta
from io import StringIO
from typing import TYPE_CHECKING

import httpx
import pytest

from retryhttp import RequestExecutor, RequestFailedError, RequestOptions
from retryhttp.utils import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def stream() -> StringIO:
    return StringIO()


@pytest.fixture
def json_logger(stream: StringIO) -> Generator[logging.Logger, None, None]:
    """Logger writing one JSON object per line to ``stream``."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("retryhttp.tests.structured")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        clear_correlation_id()


def read_records(stream: StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


##############################################
#     Tests for correlation ID management    #
##############################################


def test_get_correlation_id_initially_none() -> None:
    clear_correlation_id()
    assert get_correlation_id() is None


def test_set_and_clear_correlation_id() -> None:
    set_correlation_id("sync-1")
    assert get_correlation_id() == "sync-1"
    clear_correlation_id()
    assert get_correlation_id() is None


def test_correlation_id_is_isolated_between_tasks() -> None:
    """Test concurrent tasks each keep their own correlation ID."""

    async def worker(name: str) -> str | None:
        set_correlation_id(name)
        await asyncio.sleep(0)
        return get_correlation_id()

    async def main() -> list[str | None]:
        return await asyncio.gather(worker("a"), worker("b"))

    assert asyncio.run(main()) == ["a", "b"]


##############################################
#     Tests for StructuredFormatter          #
##############################################


def test_structured_formatter_basic_fields(json_logger: logging.Logger, stream: StringIO) -> None:
    json_logger.info("Request sent")

    (record,) = read_records(stream)
    assert record["message"] == "Request sent"
    assert record["level"] == "INFO"
    assert record["logger"] == "retryhttp.tests.structured"
    assert record["function"] == "test_structured_formatter_basic_fields"
    assert {"timestamp", "module", "line"} <= record.keys()
    assert "correlation_id" not in record


def test_structured_formatter_correlation_id(
    json_logger: logging.Logger, stream: StringIO
) -> None:
    set_correlation_id("order-sync-42")
    json_logger.debug("Waiting")

    (record,) = read_records(stream)
    assert record["correlation_id"] == "order-sync-42"


def test_structured_formatter_extra_fields(json_logger: logging.Logger, stream: StringIO) -> None:
    json_logger.info("Done", extra={"status_code": 503, "elapsed": timedelta(seconds=1)})

    (record,) = read_records(stream)
    assert record["status_code"] == 503
    assert record["elapsed"] == "0:00:01"


def test_structured_formatter_exception(json_logger: logging.Logger, stream: StringIO) -> None:
    try:
        msg = "boom"
        raise RuntimeError(msg)
    except RuntimeError:
        json_logger.exception("Failed")

    (record,) = read_records(stream)
    assert record["level"] == "ERROR"
    assert "RuntimeError: boom" in record["exception"]


def test_structured_formatter_timestamp(json_logger: logging.Logger, stream: StringIO) -> None:
    json_logger.info("Timestamp")

    timestamp = read_records(stream)[0]["timestamp"]
    # YYYY-MM-DDTHH:MM:SS.mmmZ
    assert len(timestamp) == 24
    assert timestamp[10] == "T"
    assert timestamp.endswith("Z")


##############################################
#     Tests for log_structured               #
##############################################


def test_log_structured(json_logger: logging.Logger, stream: StringIO) -> None:
    log_structured(json_logger, logging.WARNING, "Gave up", url="https://a.b", attempts=4)

    (record,) = read_records(stream)
    assert record["level"] == "WARNING"
    assert record["url"] == "https://a.b"
    assert record["attempts"] == 4


def test_log_structured_respects_level(json_logger: logging.Logger, stream: StringIO) -> None:
    json_logger.setLevel(logging.INFO)
    log_structured(json_logger, logging.DEBUG, "Hidden")
    log_structured(json_logger, logging.INFO, "Shown")

    assert [record["message"] for record in read_records(stream)] == ["Shown"]


def test_executor_failure_is_logged_as_json(stream: StringIO) -> None:
    """Test the terminal failure of the executor carries structured
    fields."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("retryhttp.core.attempt")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    executor = RequestExecutor(
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        sleep=lambda seconds: None,
    )
    try:
        with pytest.raises(RequestFailedError):
            executor.execute(RequestOptions(url="https://api.example.com/a", retry_count=1))
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    record = read_records(stream)[-1]
    assert record["url"] == "https://api.example.com/a"
    assert record["method"] == "POST"
    assert record["attempts"] == 2
    assert record["status_code"] == 500
    assert record["error_kind"] == "unknown"
