"""Per-resource helpers mapping Zencoder endpoints onto the client dispatchers."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import ValidationError

from .config import OptionsLike
from .errors import NotificationParsingError
from .schemas import Notification

logger = logging.getLogger(__name__)

ResourceId = int | str


class DataProxy(Protocol):
    """The four dispatch operations resource helpers call into."""

    async def retrieve_data(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        options: OptionsLike = None,
    ) -> Any:  # pragma: no cover - protocol
        """GET *path*."""
        ...

    async def delete_data(
        self, path: str, options: OptionsLike = None
    ) -> Any:  # pragma: no cover - protocol
        """DELETE *path*."""
        ...

    async def create_data(
        self, path: str, body: str | bytes = "", options: OptionsLike = None
    ) -> Any:  # pragma: no cover - protocol
        """POST *body* to *path*."""
        ...

    async def update_data(
        self, path: str, body: str | bytes = "", options: OptionsLike = None
    ) -> Any:  # pragma: no cover - protocol
        """PUT *body* to *path*."""
        ...


def _encode(params: Mapping[str, Any] | None) -> str:
    """Serialise *params* to a JSON request body, or ``""`` when there are none."""
    if not params:
        return ""
    return json.dumps(params)


class _Resource:
    def __init__(self, proxy: DataProxy) -> None:
        self._proxy = proxy


class Accounts(_Resource):
    """Account endpoints."""

    async def create(
        self, params: Mapping[str, Any] | None = None, options: OptionsLike = None
    ) -> Any:
        """Create a new account. Does not require an API key."""
        return await self._proxy.create_data("account", _encode(params), options)

    async def details(self, options: OptionsLike = None) -> Any:
        """Return details of the account owning the API key."""
        return await self._proxy.retrieve_data("account", options=options)

    async def integration(self, options: OptionsLike = None) -> Any:
        """Put the account into integration mode."""
        return await self._proxy.update_data("account/integration", options=options)

    async def live(self, options: OptionsLike = None) -> Any:
        """Put the account into live mode."""
        return await self._proxy.update_data("account/live", options=options)


class Jobs(_Resource):
    """Encoding job endpoints."""

    async def create(
        self, params: Mapping[str, Any] | None = None, options: OptionsLike = None
    ) -> Any:
        """Submit a new encoding job described by *params*."""
        return await self._proxy.create_data("jobs", _encode(params), options)

    async def index(
        self, params: Mapping[str, Any] | None = None, options: OptionsLike = None
    ) -> Any:
        """List jobs; *params* may carry ``page``, ``per_page`` and ``state``."""
        return await self._proxy.retrieve_data("jobs", params, options)

    async def details(self, job_id: ResourceId, options: OptionsLike = None) -> Any:
        return await self._proxy.retrieve_data(f"jobs/{job_id}", options=options)

    async def progress(self, job_id: ResourceId, options: OptionsLike = None) -> Any:
        return await self._proxy.retrieve_data(f"jobs/{job_id}/progress", options=options)

    async def resubmit(self, job_id: ResourceId, options: OptionsLike = None) -> Any:
        """Resubmit a failed or cancelled job."""
        return await self._proxy.update_data(f"jobs/{job_id}/resubmit", options=options)

    async def cancel(self, job_id: ResourceId, options: OptionsLike = None) -> Any:
        return await self._proxy.update_data(f"jobs/{job_id}/cancel", options=options)

    async def finish(self, job_id: ResourceId, options: OptionsLike = None) -> Any:
        """Finish a live-stream job."""
        return await self._proxy.update_data(f"jobs/{job_id}/finish", options=options)


class Inputs(_Resource):
    """Input media endpoints."""

    async def details(self, input_id: ResourceId, options: OptionsLike = None) -> Any:
        return await self._proxy.retrieve_data(f"inputs/{input_id}", options=options)

    async def progress(self, input_id: ResourceId, options: OptionsLike = None) -> Any:
        return await self._proxy.retrieve_data(f"inputs/{input_id}/progress", options=options)


class Outputs(_Resource):
    """Output media endpoints."""

    async def details(self, output_id: ResourceId, options: OptionsLike = None) -> Any:
        return await self._proxy.retrieve_data(f"outputs/{output_id}", options=options)

    async def progress(self, output_id: ResourceId, options: OptionsLike = None) -> Any:
        return await self._proxy.retrieve_data(f"outputs/{output_id}/progress", options=options)


class Notifications(_Resource):
    """Helpers for notifications Zencoder POSTs to your endpoints."""

    def parse_incoming(self, body: str | bytes) -> Notification:
        """Parse the raw body of an incoming notification request.

        Raises:
            NotificationParsingError: If *body* is not a JSON notification document.

        """
        try:
            return Notification.model_validate_json(body)
        except ValidationError as exc:
            logger.error("Rejected incoming notification: %s", exc)
            raise NotificationParsingError(str(exc)) from exc
