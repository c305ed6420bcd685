"""Tests for the client dispatchers and their interaction with the transport."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import pytest

from zencoder_client import (
    InvalidStatusError,
    RequestOptions,
    TransportResult,
    UnsupportedContentTypeError,
    ZencoderClient,
    ZencoderClientDependencies,
    ZencoderConfig,
)
from zencoder_client.telemetry import RequestMetric, ResponseErrorEvent

JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass(slots=True)
class RecordedRequest:
    """A request captured by :class:`RecordingTransport`."""

    method: str
    url: str
    headers: Mapping[str, str] | None
    content: str | bytes | None


def _default_response() -> TransportResult:
    return TransportResult(200, JSON_HEADERS, '{"ok": true}')


@dataclass
class RecordingTransport:
    """Transport stub that records requests and replays a canned result."""

    result: TransportResult = field(default_factory=_default_response)
    requests: list[RecordedRequest] = field(default_factory=list)
    closed: bool = False

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
    ) -> TransportResult:
        """Record the request and return the canned result."""
        self.requests.append(RecordedRequest(method, url, headers, content))
        return self.result

    async def close(self) -> None:
        """Mark the transport as closed."""
        self.closed = True


class RecordingTelemetrySink:
    """Telemetry sink collecting every signal it receives."""

    def __init__(self) -> None:
        """Initialise empty signal lists."""
        self.events: list[ResponseErrorEvent] = []
        self.metrics: list[RequestMetric] = []

    def record_event(self, event: ResponseErrorEvent) -> None:
        """Store *event*."""
        self.events.append(event)

    def record_metric(self, metric: RequestMetric) -> None:
        """Store *metric*."""
        self.metrics.append(metric)


def _client(
    transport: RecordingTransport,
    *,
    config: ZencoderConfig | None = None,
    telemetry: RecordingTelemetrySink | None = None,
) -> ZencoderClient:
    return ZencoderClient(
        config,
        dependencies=ZencoderClientDependencies(transport=transport, telemetry=telemetry),
    )


@pytest.mark.asyncio
async def test_retrieve_data_appends_query_string_in_order() -> None:
    """GET parameters are form-encoded in the mapping's iteration order."""
    transport = RecordingTransport()
    client = _client(transport)

    result = await client.retrieve_data("jobs", {"a": 1, "b": 2})

    assert result == {"ok": True}
    (request,) = transport.requests
    assert request.method == "GET"
    assert request.url == "/api/v2/jobs?a=1&b=2"
    assert request.url.endswith("?a=1&b=2")
    assert request.content is None


@pytest.mark.asyncio
async def test_retrieve_data_without_params_has_no_query_string() -> None:
    """Empty parameters leave the URL without a query string."""
    transport = RecordingTransport()
    client = _client(transport)

    await client.retrieve_data("jobs/1", {})

    assert transport.requests[0].url == "/api/v2/jobs/1"


@pytest.mark.asyncio
async def test_retrieve_data_form_encodes_values() -> None:
    """Parameter values are escaped with standard form encoding."""
    transport = RecordingTransport()
    client = _client(transport)

    await client.retrieve_data("jobs", {"state": "in progress", "label": "a&b"})

    assert transport.requests[0].url == "/api/v2/jobs?state=in+progress&label=a%26b"


@pytest.mark.asyncio
async def test_retrieve_data_sends_booleans_as_digits_and_skips_none() -> None:
    """Booleans become 1/0 and None values are left out of the query string."""
    transport = RecordingTransport()
    client = _client(transport)

    await client.retrieve_data("jobs", {"test": True, "x": None})
    await client.retrieve_data("jobs", {"test": False, "state": ["finished", None, "failed"]})
    await client.retrieve_data("jobs", {"state": None})

    assert [request.url for request in transport.requests] == [
        "/api/v2/jobs?test=1",
        "/api/v2/jobs?test=0&state=finished&state=failed",
        "/api/v2/jobs",
    ]


@pytest.mark.asyncio
async def test_delete_data_sends_delete_without_body() -> None:
    """DELETE carries no body and no JSON content type."""
    transport = RecordingTransport(result=TransportResult(204, {}, ""))
    client = _client(transport)

    assert await client.delete_data("jobs/7") is True

    (request,) = transport.requests
    assert request.method == "DELETE"
    assert request.url == "/api/v2/jobs/7"
    assert request.headers is None
    assert request.content is None


@pytest.mark.asyncio
async def test_create_data_forwards_body_verbatim() -> None:
    """POST forwards the pre-serialised body and sets the JSON content type."""
    transport = RecordingTransport(result=TransportResult(201, JSON_HEADERS, '{"id":5}'))
    client = _client(transport)
    body = '{"input": "s3://bucket/movie.mov"}'

    result = await client.create_data("jobs", body)

    assert result == {"id": 5}
    (request,) = transport.requests
    assert request.method == "POST"
    assert request.url == "/api/v2/jobs"
    assert request.headers == {"Content-Type": "application/json"}
    assert request.content == body


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method_name", "http_method"), [("create_data", "POST"), ("update_data", "PUT")]
)
async def test_empty_body_sends_no_content(method_name: str, http_method: str) -> None:
    """POST and PUT without a body still declare JSON but send no content."""
    transport = RecordingTransport(result=TransportResult(204, {}, ""))
    client = _client(transport)

    assert await getattr(client, method_name)("jobs/1/cancel") is True

    (request,) = transport.requests
    assert request.method == http_method
    assert request.headers == {"Content-Type": "application/json"}
    assert request.content is None


@pytest.mark.asyncio
async def test_update_data_forwards_body() -> None:
    """PUT forwards a supplied body verbatim."""
    transport = RecordingTransport()
    client = _client(transport)

    await client.update_data("account/integration", b'{"x": 1}')

    (request,) = transport.requests
    assert request.method == "PUT"
    assert request.content == b'{"x": 1}'


@pytest.mark.asyncio
async def test_options_apply_to_every_dispatcher() -> None:
    """Version overrides and no_transform reach the transport URL."""
    transport = RecordingTransport(result=TransportResult(204, {}, ""))
    client = _client(transport, config=ZencoderConfig(api_version="v3"))

    await client.retrieve_data("jobs", options={"api_version": "v1"})
    await client.delete_data("jobs/1", options=RequestOptions(no_transform=True))
    await client.create_data("/custom/endpoint", options={"no_transform": True})
    await client.update_data("jobs/1/cancel")

    assert [request.url for request in transport.requests] == [
        "/api/v1/jobs",
        "jobs/1",
        "/custom/endpoint",
        "/api/v3/jobs/1/cancel",
    ]


@pytest.mark.asyncio
async def test_errors_propagate_and_are_reported() -> None:
    """Rejected responses raise and emit a telemetry event."""
    body = '{"errors":["bad"]}'
    transport = RecordingTransport(result=TransportResult(422, JSON_HEADERS, body))
    telemetry = RecordingTelemetrySink()
    client = _client(transport, telemetry=telemetry)

    with pytest.raises(InvalidStatusError) as excinfo:
        await client.create_data("jobs", "{}")

    assert excinfo.value.status == 422
    assert excinfo.value.body == body
    assert len(transport.requests) == 1
    (metric,) = telemetry.metrics
    assert isinstance(metric, RequestMetric)
    assert metric.status == 422
    assert metric.method == "POST"
    (event,) = telemetry.events
    assert isinstance(event, ResponseErrorEvent)
    assert event.error_type == "InvalidStatusError"
    assert event.url == "/api/v2/jobs"
    assert event.emitted_at.tzinfo is not None
    assert metric.emitted_at <= event.emitted_at


@pytest.mark.asyncio
async def test_unsupported_content_type_is_not_retried() -> None:
    """A rejected response results in exactly one transport call."""
    transport = RecordingTransport(result=TransportResult(200, {"Content-Type": "text/html"}, ""))
    client = _client(transport)

    with pytest.raises(UnsupportedContentTypeError):
        await client.retrieve_data("jobs")

    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_context_manager_closes_transport() -> None:
    """Leaving ``async with`` closes the transport."""
    transport = RecordingTransport()

    async with _client(transport) as client:
        await client.retrieve_data("account")

    assert transport.closed is True


def test_client_exposes_resource_helpers_and_config() -> None:
    """Resource helpers are wired at construction and config is kept as given."""
    config = ZencoderConfig(api_key="secret", api_version="v2")
    client = _client(RecordingTransport(), config=config)

    assert client.config is config
    assert client.resolve_path("jobs") == "/api/v2/jobs"
    for name in ("accounts", "inputs", "jobs", "notifications", "outputs"):
        assert getattr(client, name) is not None
