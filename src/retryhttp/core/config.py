r"""Default values shared by the request options, the executors and the
response decoder."""

from __future__ import annotations

__all__ = [
    "DEFAULT_METHOD",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_INTERVAL",
    "JSON_CONTENT_TYPES",
    "XML_CONTENT_TYPES",
]

# Requests are POST unless the caller says otherwise
DEFAULT_METHOD = "POST"

# Number of retries after the first attempt
# Total attempts = retry_count + 1
DEFAULT_RETRY_COUNT = 3

# Fixed delay in seconds before every attempt, the first one included
DEFAULT_RETRY_INTERVAL = 1.0

# Declared response content types decoded as JSON
JSON_CONTENT_TYPES = frozenset({"application/json"})

# Declared response content types decoded as XML
XML_CONTENT_TYPES = frozenset({"text/xml", "application/xml"})
