"""Public async client facade for the Zencoder API."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Final

import httpx

from .config import OptionsLike, ZencoderConfig
from .errors import ResponseError
from .http import AsyncTransportProtocol, TransportResult, ZencoderHttpClient
from .paths import resolve_api_path
from .resources import Accounts, Inputs, Jobs, Notifications, Outputs
from .responses import process_response
from .telemetry import NullTelemetrySink, RequestMetric, ResponseErrorEvent, TelemetrySink

logger = logging.getLogger(__name__)

JSON_HEADERS: Final[Mapping[str, str]] = {"Content-Type": "application/json"}

Body = str | bytes


@dataclass(slots=True)
class ZencoderClientDependencies:
    """Optional dependency overrides for :class:`ZencoderClient`."""

    transport: AsyncTransportProtocol | None = None
    telemetry: TelemetrySink | None = None


class ZencoderClient:
    """Async Zencoder client that turns resource paths into API calls.

    Each dispatcher performs exactly one transport call, without retries, and
    returns whatever :func:`~zencoder_client.responses.process_response` makes
    of the result. Resource helpers are available as ``accounts``, ``inputs``,
    ``jobs``, ``notifications`` and ``outputs``.
    """

    def __init__(
        self,
        config: ZencoderConfig | None = None,
        *,
        dependencies: ZencoderClientDependencies | None = None,
    ) -> None:
        """Validate *config*, build the transport and wire the resource helpers.

        Raises:
            ConfigurationError: If the default transport cannot establish TLS support.

        """
        deps = dependencies or ZencoderClientDependencies()
        self._config = config or ZencoderConfig()
        self._transport = deps.transport or ZencoderHttpClient(self._config)
        self._telemetry = deps.telemetry or NullTelemetrySink()
        self.accounts = Accounts(self)
        self.inputs = Inputs(self)
        self.jobs = Jobs(self)
        self.notifications = Notifications(self)
        self.outputs = Outputs(self)
        logger.debug(
            "ZencoderClient initialised for %s (API %s)",
            self._config.api_host,
            self._config.api_version,
        )

    @property
    def config(self) -> ZencoderConfig:
        """Return the immutable configuration this client was built with."""
        return self._config

    def resolve_path(self, path: str, options: OptionsLike = None) -> str:
        """Return the request path for *path* using this client's default API version."""
        return resolve_api_path(path, options, self._config.api_version)

    async def retrieve_data(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        options: OptionsLike = None,
    ) -> Any:
        """GET the resource at *path*, appending *params* as a query string."""
        url = self.resolve_path(path, options)
        query = build_query_string(params or {})
        if query:
            url = f"{url}?{query}"
        return await self._dispatch("GET", url)

    async def delete_data(self, path: str, options: OptionsLike = None) -> Any:
        """DELETE the resource at *path*."""
        return await self._dispatch("DELETE", self.resolve_path(path, options))

    async def create_data(self, path: str, body: Body = "", options: OptionsLike = None) -> Any:
        """POST the pre-serialised JSON *body* to *path*."""
        return await self._dispatch(
            "POST",
            self.resolve_path(path, options),
            headers=JSON_HEADERS,
            content=body or None,
        )

    async def update_data(self, path: str, body: Body = "", options: OptionsLike = None) -> Any:
        """PUT the pre-serialised JSON *body* to *path*."""
        return await self._dispatch(
            "PUT",
            self.resolve_path(path, options),
            headers=JSON_HEADERS,
            content=body or None,
        )

    async def close(self) -> None:
        """Release the underlying transport."""
        await self._transport.close()
        logger.debug("ZencoderClient closed")

    async def __aenter__(self) -> ZencoderClient:
        """Return the client for use in an ``async with`` block."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Close the transport when leaving an ``async with`` block."""
        await self.close()

    async def _dispatch(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: Body | None = None,
    ) -> Any:
        started = time.perf_counter()
        result = await self._transport.send(method, url, headers=headers, content=content)
        self._telemetry.record_metric(
            RequestMetric(
                method=method,
                url=url,
                status=result.status,
                duration_ms=(time.perf_counter() - started) * 1000.0,
            )
        )
        return self._process(method, url, result)

    def _process(self, method: str, url: str, result: TransportResult) -> Any:
        try:
            return process_response(result)
        except ResponseError as exc:
            logger.warning("%s %s rejected: %s", method, url, exc)
            self._telemetry.record_event(
                ResponseErrorEvent(
                    method=method,
                    url=url,
                    status=result.status,
                    error_type=exc.__class__.__name__,
                    message=str(exc),
                )
            )
            raise


def build_query_string(params: Mapping[str, Any]) -> str:
    """Form-encode *params* in iteration order.

    ``None`` values are left out and booleans are sent as ``1``/``0``; sequence
    values repeat the key once per item.
    """
    items: list[tuple[str, Any]] = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else (value,)
        items.extend((key, _query_value(item)) for item in values if item is not None)
    return str(httpx.QueryParams(items))


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "1" if value else "0"
    return value
