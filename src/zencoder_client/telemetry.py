"""Telemetry hooks reporting request timings and rejected responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class RequestMetric:
    """Timing of one request, recorded once the transport has answered."""

    method: str
    url: str
    status: int
    duration_ms: float
    emitted_at: datetime = field(default_factory=_utcnow, kw_only=True)


@dataclass(frozen=True, slots=True)
class ResponseErrorEvent:
    """A response the client refused, with the exception it raised."""

    method: str
    url: str
    status: int
    error_type: str
    message: str | None = None
    emitted_at: datetime = field(default_factory=_utcnow, kw_only=True)


class TelemetrySink(Protocol):
    """Receiver for the client's request metrics and error events."""

    def record_event(self, event: ResponseErrorEvent) -> None:  # pragma: no cover - protocol
        """Record a rejected response."""
        ...

    def record_metric(self, metric: RequestMetric) -> None:  # pragma: no cover - protocol
        """Record a completed request."""
        ...


class NullTelemetrySink(TelemetrySink):
    """Sink used when the caller supplies none; discards everything."""

    def record_event(self, event: ResponseErrorEvent) -> None:
        """Discard *event*."""

    def record_metric(self, metric: RequestMetric) -> None:
        """Discard *metric*."""
