r"""Materialization of a response body into a caller-requested result.

The result is selected with ``result_type``:

- ``DecodeTarget.TEXT`` or ``str``: the body as text, whatever the
  content type;
- ``DecodeTarget.BYTES`` or ``bytes``: the body as bytes;
- ``DecodeTarget.STREAM``: an iterator over the body bytes. Read
  failures while iterating are raised as ``DecodeError`` too;
- any other type: the body text decoded according to the declared
  response content type. JSON and XML documents are validated against the
  type with pydantic; any other content type only supports ``str``,
  ``int``, ``float``, ``bool`` and ``Enum`` targets.
"""

from __future__ import annotations

__all__ = [
    "DecodeTarget",
    "convert_text",
    "decode_response",
    "decode_response_async",
    "decode_text",
    "normalize_media_type",
]

import logging
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import TypeAdapter

from retryhttp.core.config import JSON_CONTENT_TYPES, XML_CONTENT_TYPES
from retryhttp.core.xml import parse_xml
from retryhttp.exceptions import DecodeError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

logger: logging.Logger = logging.getLogger(__name__)

# ParseError from the XML parser is a SyntaxError, pydantic's ValidationError
# and defusedxml's errors are ValueErrors
_DECODE_ERRORS = (ValueError, TypeError, SyntaxError, httpx.HTTPError, httpx.StreamError)


class DecodeTarget(Enum):
    r"""Raw forms a response body can be returned as."""

    TEXT = "text"
    BYTES = "bytes"
    STREAM = "stream"


def normalize_media_type(content_type: str | None) -> str | None:
    """Normalize a declared content type for comparison.

    Example:
        ```pycon
        >>> from retryhttp.decode import normalize_media_type
        >>> normalize_media_type("Application/JSON; charset=utf-8")
        'application/json'
        >>> normalize_media_type(None)

        ```
    """
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower()


@lru_cache(maxsize=128)
def _type_adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def _convert_enum(text: str, enum_type: type[Enum]) -> Enum:
    value = text.strip()
    for member in enum_type:
        if str(member.value) == value:
            return member
    try:
        return enum_type[value]
    except KeyError:
        msg = f"{value!r} is not a valid {enum_type.__name__}"
        raise ValueError(msg) from None


def convert_text(text: str, result_type: Any) -> Any:
    """Convert raw response text to a primitive type.

    Args:
        text: The response text.
        result_type: One of ``str``, ``int``, ``float``, ``bool`` or an
            ``Enum`` subclass. Enum members are matched by value first,
            then by name.

    Returns:
        The converted value.

    Raises:
        ValueError: If the text is not a valid representation of
            ``result_type``.
        TypeError: If ``result_type`` is not supported.

    Example:
        ```pycon
        >>> from retryhttp.decode import convert_text
        >>> convert_text(" 42\n", int)
        42
        >>> convert_text("True", bool)
        True
        >>> convert_text("raw body", str)
        'raw body'

        ```
    """
    if result_type is str:
        return text
    if result_type is bool:
        lowered = text.strip().lower()
        if lowered not in {"true", "false"}:
            msg = f"{text!r} is not a valid bool"
            raise ValueError(msg)
        return lowered == "true"
    if isinstance(result_type, type) and issubclass(result_type, Enum):
        return _convert_enum(text, result_type)
    if result_type in (int, float):
        return result_type(text.strip())
    msg = (
        f"cannot convert response text to {result_type!r} without a JSON or XML "
        "response content type"
    )
    raise TypeError(msg)


def decode_text(text: str, result_type: Any, content_type: str | None = None) -> Any:
    """Decode response text according to the declared content type.

    Args:
        text: The response text.
        result_type: The type to decode into.
        content_type: The declared response content type.

    Returns:
        The decoded value.

    Example:
        ```pycon
        >>> from retryhttp.decode import decode_text
        >>> decode_text('{"a": 1}', dict[str, int], "application/json")
        {'a': 1}
        >>> decode_text("<r><a>1</a></r>", dict[str, int], "text/xml")
        {'a': 1}
        >>> decode_text("3.5", float)
        3.5

        ```
    """
    media_type = normalize_media_type(content_type)
    if media_type in JSON_CONTENT_TYPES:
        return _type_adapter(result_type).validate_json(text)
    if media_type in XML_CONTENT_TYPES:
        return _type_adapter(result_type).validate_python(parse_xml(text))
    return convert_text(text, result_type)


def _decode_error(response: httpx.Response, result_type: Any, exc: Exception) -> DecodeError:
    name = getattr(result_type, "__name__", repr(result_type))
    logger.debug(f"Failed to decode response with status {response.status_code} into {name}: {exc}")
    return DecodeError(
        f"failed to decode response with status {response.status_code} into {name}: {exc}",
        cause=exc,
        status_code=response.status_code,
    )


def _raw_target(result_type: Any) -> Any:
    # The plain str and bytes types are the raw TEXT and BYTES results
    if result_type is str:
        return DecodeTarget.TEXT
    if result_type is bytes:
        return DecodeTarget.BYTES
    return result_type


def _iter_stream(response: httpx.Response, result_type: Any) -> Iterator[bytes]:
    try:
        yield from response.iter_bytes()
    except _DECODE_ERRORS as exc:
        raise _decode_error(response, result_type, exc) from exc


async def _aiter_stream(response: httpx.Response, result_type: Any) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except _DECODE_ERRORS as exc:
        raise _decode_error(response, result_type, exc) from exc


def decode_response(
    response: httpx.Response,
    result_type: Any = DecodeTarget.TEXT,
    content_type: str | None = None,
) -> Any:
    """Decode a response body.

    Args:
        response: The response to decode. It is not closed.
        result_type: A ``DecodeTarget`` for a raw result, or the type to
            decode the body into.
        content_type: The declared response content type. Only used when
            ``result_type`` is not a ``DecodeTarget``.

    Returns:
        The decoded value. For ``DecodeTarget.STREAM`` an iterator of
        bytes owned by the caller.

    Raises:
        DecodeError: If the body cannot be read or converted.

    Example:
        ```pycon
        >>> import httpx
        >>> from retryhttp.decode import DecodeTarget, decode_response
        >>> response = httpx.Response(200, text="hello")
        >>> decode_response(response)
        'hello'
        >>> decode_response(response, DecodeTarget.BYTES)
        b'hello'

        ```
    """
    result_type = _raw_target(result_type)
    if result_type is DecodeTarget.STREAM:
        return _iter_stream(response, result_type)
    try:
        content = response.read()
        if result_type is DecodeTarget.BYTES:
            return content
        if result_type is DecodeTarget.TEXT:
            return response.text
        return decode_text(response.text, result_type, content_type)
    except _DECODE_ERRORS as exc:
        raise _decode_error(response, result_type, exc) from exc


async def decode_response_async(
    response: httpx.Response,
    result_type: Any = DecodeTarget.TEXT,
    content_type: str | None = None,
) -> Any:
    """Decode a response body received by an async client.

    Same as ``decode_response`` but the body is read with
    ``response.aread()`` and ``DecodeTarget.STREAM`` returns an async
    iterator of bytes.

    Raises:
        DecodeError: If the body cannot be read or converted.
    """
    result_type = _raw_target(result_type)
    if result_type is DecodeTarget.STREAM:
        return _aiter_stream(response, result_type)
    try:
        content = await response.aread()
        if result_type is DecodeTarget.BYTES:
            return content
        if result_type is DecodeTarget.TEXT:
            return response.text
        return decode_text(response.text, result_type, content_type)
    except _DECODE_ERRORS as exc:
        raise _decode_error(response, result_type, exc) from exc
