"""Interpretation of raw transport results returned by the Zencoder API."""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Final

from .errors import (
    InvalidStatusError,
    MissingContentTypeError,
    UnsupportedContentTypeError,
)
from .http import TransportResult

logger = logging.getLogger(__name__)

NO_CONTENT: Final = 204


class ContentType(str, Enum):
    """Response content types the client knows how to decode."""

    JSON = "application/json"
    JSON_UTF8 = "application/json; charset=utf-8"

    @classmethod
    def lookup(cls, value: str) -> ContentType | None:
        """Return the member whose value is exactly *value*, if any."""
        return _CONTENT_TYPES.get(value)


_CONTENT_TYPES: Final[dict[str, ContentType]] = {member.value: member for member in ContentType}


def process_response(result: TransportResult) -> Any:
    """Turn *result* into the value handed back to the caller.

    Returns ``True`` for ``204 No Content`` and the decoded JSON document for
    any other 2xx JSON response. A body the JSON decoder rejects yields ``None``.

    Raises:
        MissingContentTypeError: If the response has no Content-Type header.
        UnsupportedContentTypeError: If the Content-Type is not a JSON variant.
        InvalidStatusError: If a JSON response carries a non-2xx status.

    """
    if result.status == NO_CONTENT:
        return True
    raw_content_type = result.header("Content-Type")
    if not raw_content_type:
        logger.error("Response with status %s is missing Content-Type", result.status)
        raise MissingContentTypeError()
    content_type = ContentType.lookup(raw_content_type)
    if content_type is None:
        logger.error(
            "Response with status %s has unexpected content type %s",
            result.status,
            raw_content_type,
        )
        raise UnsupportedContentTypeError(raw_content_type)
    return _process_json_response(result)


def _process_json_response(result: TransportResult) -> Any:
    if not 200 <= result.status < 300:
        logger.error("Zencoder returned status %s: %s", result.status, result.body)
        raise InvalidStatusError(result.status, result.body)
    if not result.body.strip():
        return None
    try:
        return json.loads(result.body)
    except ValueError:
        logger.warning("Response with status %s is not valid JSON: %s", result.status, result.body)
        return None
