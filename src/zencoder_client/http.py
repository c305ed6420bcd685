"""Async HTTP transport used to reach the Zencoder API."""

from __future__ import annotations

import logging
import ssl
import time
from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from typing import Protocol

import httpx

from .config import ZencoderConfig
from .errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "Zencoder-Api-Key"


@dataclass(frozen=True, slots=True)
class TransportResult:
    """Raw outcome of one HTTP exchange, before any interpretation."""

    status: int
    headers: Mapping[str, str]
    body: str

    def __iter__(self) -> Iterator[object]:
        """Unpack as ``status, headers, body``."""
        return iter((self.status, self.headers, self.body))

    def header(self, name: str) -> str | None:
        """Return the value of header *name*, matched case-insensitively."""
        return httpx.Headers(self.headers).get(name)


class AsyncTransportProtocol(Protocol):
    """Protocol describing the single HTTP operation the client depends on."""

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
    ) -> TransportResult:  # pragma: no cover - protocol signature
        """Send one request and return its status, headers and body."""
        ...

    async def close(self) -> None:  # pragma: no cover - protocol signature
        """Release HTTP resources and close underlying connections."""
        ...


class ZencoderHttpClient(AsyncTransportProtocol):
    """httpx-based transport that injects credentials and manages connection pooling."""

    def __init__(
        self,
        config: ZencoderConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise the transport with optional *config*.

        *transport* replaces httpx's network transport, which tests use to
        serve canned responses.
        """
        self._config = config or ZencoderConfig()
        limits = httpx.Limits(max_connections=self._config.max_connections or None)
        self._client = httpx.AsyncClient(
            base_url=str(self._config.api_host),
            limits=limits,
            timeout=httpx.Timeout(self._config.timeout),
            verify=build_ssl_context(self._config),
            headers=self._build_default_headers(),
            transport=transport,
        )

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: str | bytes | None = None,
    ) -> TransportResult:
        """Send *method* to *url* and collect the response without judging its status."""
        logger.debug(
            "%s %s with %s body", method, url, "no" if content is None else f"{len(content)}-byte"
        )
        started = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                url,
                headers=headers,
                content=content,
                follow_redirects=False,
            )
        except httpx.HTTPError as exc:
            logger.error("HTTP %s %s failed: %s", method, url, exc)
            raise TransportError(str(exc)) from exc
        logger.debug(
            "%s %s returned %s in %.2f ms",
            method,
            url,
            response.status_code,
            (time.perf_counter() - started) * 1000.0,
        )
        return TransportResult(
            status=response.status_code,
            headers=response.headers,
            body=response.text,
        )

    async def close(self) -> None:
        """Close the underlying httpx.AsyncClient instance."""
        await self._client.aclose()
        logger.debug("httpx.AsyncClient closed for base URL %s", self._client.base_url)

    def _build_default_headers(self) -> MutableMapping[str, str]:
        """Return the default header set applied to every request."""
        headers = {
            "User-Agent": self._config.user_agent,
            "Accept": "application/json",
        }
        if self._config.api_key:
            headers[API_KEY_HEADER] = self._config.api_key
        return headers


def build_ssl_context(config: ZencoderConfig) -> ssl.SSLContext:
    """Return the TLS context used to verify the API host.

    Raises:
        ConfigurationError: If the configured CA bundle is missing or unusable.

    """
    cafile = config.ca_bundle
    if cafile is not None and not cafile.is_file():
        raise ConfigurationError(f"CA bundle not found: {cafile}")
    try:
        return ssl.create_default_context(cafile=None if cafile is None else str(cafile))
    except (ssl.SSLError, OSError) as exc:
        raise ConfigurationError(f"Unable to initialise TLS support: {exc}") from exc
