"""Configuration schemas for the Zencoder client."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import TypedDict

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    NonNegativeInt,
    PositiveFloat,
)

DEFAULT_API_VERSION = "v2"
DEFAULT_API_HOST = "https://app.zencoder.com"
USER_AGENT = "ZencoderPython v2.0"


class _ZencoderConfigOverrides(TypedDict, total=False):
    """Typed override map for :class:`ZencoderConfig` initialisation."""

    api_key: str
    api_version: str
    api_host: HttpUrl
    timeout: float


class ZencoderConfig(BaseModel):
    """Connection settings shared by every request a client makes."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: str | None = Field(
        default=None,
        description="Zencoder API key sent with every request (optional for account creation)",
    )
    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        min_length=1,
        description="Default API version used to build the /api/<version>/ prefix",
    )
    api_host: HttpUrl = Field(
        default=HttpUrl(DEFAULT_API_HOST),
        description="Root URL of the Zencoder API",
    )
    user_agent: str = Field(default=USER_AGENT, description="User-Agent header for requests")
    timeout: PositiveFloat = Field(
        default=30.0, description="Per-request timeout in seconds applied by the transport"
    )
    max_connections: NonNegativeInt = Field(
        default=10, description="Maximum concurrent HTTP connections (0 => unlimited)"
    )
    ca_bundle: Path | None = Field(
        default=None,
        description="Optional PEM bundle of trusted certificates; system trust store otherwise",
    )

    @classmethod
    def from_environment(cls, *, env: Mapping[str, str] | None = None) -> ZencoderConfig:
        """Build a configuration from environment variables.

        Recognised variables:
            - ``ZENCODER_API_KEY`` → ``api_key``
            - ``ZENCODER_API_VERSION`` → ``api_version`` (defaults to ``v2``)
            - ``ZENCODER_API_HOST`` → ``api_host``
            - ``ZENCODER_TIMEOUT`` → ``timeout`` (float seconds)

        The CLI loads ``.env`` via python-dotenv before calling this, so no file
        parsing happens here.
        """
        source = dict(os.environ if env is None else env)
        updates: _ZencoderConfigOverrides = {}

        api_key = source.get("ZENCODER_API_KEY")
        if api_key:
            updates["api_key"] = api_key
        api_version = source.get("ZENCODER_API_VERSION")
        if api_version:
            updates["api_version"] = api_version
        api_host = source.get("ZENCODER_API_HOST")
        if api_host:
            updates["api_host"] = HttpUrl(api_host)
        timeout_raw = source.get("ZENCODER_TIMEOUT")
        if timeout_raw is not None:
            try:
                updates["timeout"] = float(timeout_raw)
            except ValueError as exc:
                raise ValueError("ZENCODER_TIMEOUT must be a floating point value") from exc
        return cls(**updates)


class RequestOptions(BaseModel):
    """Per-call overrides applied when resolving an API path."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_version: str | None = Field(
        default=None, description="API version overriding the client default for one call"
    )
    no_transform: bool = Field(
        default=False,
        description="Send the path as given, without the /api/<version>/ prefix",
    )

    @classmethod
    def from_mapping(cls, options: Mapping[str, object]) -> RequestOptions:
        """Coerce a loose options mapping into :class:`RequestOptions`.

        A key counts as set when it is present with a value other than ``None``:
        a set ``no_transform`` enables the bypass, whatever its value, and a set
        ``api_version`` overrides the default version. Other keys are ignored.
        """
        version = options.get("api_version")
        return cls(
            api_version=None if version is None else str(version),
            no_transform=options.get("no_transform") is not None,
        )


OptionsLike = RequestOptions | Mapping[str, object] | None


def coerce_options(options: OptionsLike) -> RequestOptions:
    """Return *options* as a :class:`RequestOptions` instance."""
    if options is None:
        return _NO_OPTIONS
    if isinstance(options, RequestOptions):
        return options
    return RequestOptions.from_mapping(options)


_NO_OPTIONS = RequestOptions()
