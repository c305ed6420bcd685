"""Resolution of resource paths into versioned Zencoder API paths."""

from __future__ import annotations

from .config import OptionsLike, coerce_options


def resolve_api_path(path: str, options: OptionsLike, default_version: str) -> str:
    """Return the request path for *path* under the versioned API prefix.

    ``no_transform`` returns *path* untouched so callers can reach host-relative
    or absolute URLs. Otherwise the path is placed under ``/api/<version>/``,
    using the per-call ``api_version`` override when given and
    *default_version* when not. The path itself is never escaped or validated.
    """
    resolved = coerce_options(options)
    if resolved.no_transform:
        return path
    version = resolved.api_version if resolved.api_version is not None else default_version
    return f"/api/{version}/{path}"
