"""Async client library for the Zencoder video-encoding API."""

from __future__ import annotations

from .client import ZencoderClient, ZencoderClientDependencies
from .config import RequestOptions, ZencoderConfig
from .errors import (
    ConfigurationError,
    InvalidStatusError,
    MissingContentTypeError,
    NotificationParsingError,
    ResponseError,
    TransportError,
    UnsupportedContentTypeError,
    ZencoderError,
)
from .http import AsyncTransportProtocol, TransportResult, ZencoderHttpClient
from .paths import resolve_api_path
from .responses import ContentType, process_response
from .schemas import Notification, NotificationJob, NotificationMedia
from .telemetry import NullTelemetrySink, TelemetrySink

__all__ = [
    "AsyncTransportProtocol",
    "ConfigurationError",
    "ContentType",
    "InvalidStatusError",
    "MissingContentTypeError",
    "Notification",
    "NotificationJob",
    "NotificationMedia",
    "NotificationParsingError",
    "NullTelemetrySink",
    "RequestOptions",
    "ResponseError",
    "TelemetrySink",
    "TransportError",
    "TransportResult",
    "UnsupportedContentTypeError",
    "ZencoderClient",
    "ZencoderClientDependencies",
    "ZencoderConfig",
    "ZencoderError",
    "ZencoderHttpClient",
    "process_response",
    "resolve_api_path",
]
