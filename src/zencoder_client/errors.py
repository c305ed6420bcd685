"""Exception hierarchy for the Zencoder client library."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any, cast


class ZencoderError(Exception):
    """Base exception for all Zencoder client errors."""


class ConfigurationError(ZencoderError):
    """Raised when the client cannot be constructed from the supplied configuration."""


class TransportError(ZencoderError):
    """Raised when an HTTP transport request cannot be completed."""


class ResponseError(ZencoderError):
    """Base class for responses the client refuses to hand back to the caller."""


class MissingContentTypeError(ResponseError):
    """Raised when a response carries no Content-Type header."""

    def __init__(self) -> None:
        """Build the error with a fixed message."""
        super().__init__("Response header is missing Content-Type")


class UnsupportedContentTypeError(ResponseError):
    """Raised when a response declares a Content-Type other than JSON."""

    def __init__(self, content_type: str) -> None:
        """Remember the offending *content_type*."""
        super().__init__(f"Unexpected content type: {content_type}")
        self.content_type = content_type


class InvalidStatusError(ResponseError):
    """Raised when a JSON response carries a status code outside the 2xx range."""

    def __init__(self, status: int, body: str) -> None:
        """Store the *status* code and raw *body* text of the rejected response."""
        super().__init__(f"Invalid HTTP status code: {status}, body: {body}")
        self.status = status
        self.body = body

    @property
    def payload(self) -> Any:
        """Return the decoded body, or ``None`` when it is not valid JSON."""
        try:
            return json.loads(self.body)
        except ValueError:
            return None

    @property
    def errors(self) -> tuple[str, ...]:
        """Return the messages listed under the service's ``errors`` key, if any."""
        payload = self.payload
        if not isinstance(payload, dict):
            return ()
        messages = cast(dict[str, Any], payload).get("errors")
        if isinstance(messages, str):
            return (messages,)
        if isinstance(messages, Sequence):
            return tuple(str(item) for item in cast(Sequence[object], messages))
        return ()


class NotificationParsingError(ZencoderError):
    """Raised when an incoming notification body cannot be parsed."""
