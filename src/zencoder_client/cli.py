"""Command-line interface for one-off Zencoder API calls."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import traceback
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from dotenv import find_dotenv, load_dotenv
from pydantic import HttpUrl, ValidationError
from rich.console import Console

from .client import ZencoderClient
from .config import RequestOptions, ZencoderConfig
from .errors import InvalidStatusError, ZencoderError

LOG_LEVELS: Final[dict[str, int]] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

METHODS: Final[tuple[str, ...]] = ("GET", "POST", "PUT", "DELETE")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed command-line options for the Zencoder CLI."""

    method: str
    path: str
    params: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    body: str = ""
    no_transform: bool = False
    api_version: str | None = None
    api_key: str | None = None
    api_host: str | None = None
    dotenv_path: Path | None = None
    log_level: int = logging.WARNING


def parse_cli_args(argv: Sequence[str] | None = None) -> CliOptions:
    """Parse command-line arguments into :class:`CliOptions`."""
    parser = argparse.ArgumentParser(
        prog="zencoder",
        description="Send a single request to the Zencoder API and print the JSON response.",
    )
    parser.add_argument(
        "method",
        type=str.upper,
        choices=METHODS,
        help="HTTP method to use",
    )
    parser.add_argument("path", help="Resource path, e.g. 'jobs' or 'jobs/123/progress'")
    parser.add_argument(
        "--param",
        dest="params",
        action="append",
        default=None,
        metavar="KEY=VALUE",
        help="Query string parameter for GET requests (repeat for multiple distinct keys)",
    )
    body_group = parser.add_mutually_exclusive_group()
    body_group.add_argument("--body", default=None, help="JSON request body for POST/PUT")
    body_group.add_argument(
        "--body-file",
        type=Path,
        default=None,
        help="Read the JSON request body for POST/PUT from a file",
    )
    parser.add_argument(
        "--no-transform",
        action="store_true",
        help="Send PATH as given instead of prefixing /api/<version>/",
    )
    parser.add_argument(
        "--api-version",
        default=None,
        help="API version for this request (default: configured version)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key (default: ZENCODER_API_KEY from the environment or .env)",
    )
    parser.add_argument(
        "--api-host",
        default=None,
        help="API host (default: ZENCODER_API_HOST or https://app.zencoder.com)",
    )
    parser.add_argument(
        "--dotenv",
        dest="dotenv_path",
        type=Path,
        default=None,
        help="Path to a .env file (default: search from the working directory)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=tuple(LOG_LEVELS),
        default="WARNING",
        help="Logging verbosity (default: WARNING)",
    )
    namespace = parser.parse_args(argv)

    params: list[tuple[str, str]] = []
    for raw in namespace.params or ():
        key, separator, value = raw.partition("=")
        if not separator or not key:
            parser.error(f"--param expects KEY=VALUE, got {raw!r}")
        if any(existing == key for existing, _ in params):
            parser.error(f"--param {key!r} given more than once")
        params.append((key, value))
    if params and namespace.method != "GET":
        parser.error("--param is only valid for GET requests")

    body = namespace.body or ""
    if namespace.body_file is not None:
        try:
            body = namespace.body_file.read_text(encoding="utf-8")
        except OSError as exc:
            parser.error(f"cannot read --body-file: {exc}")
    if body and namespace.method not in {"POST", "PUT"}:
        parser.error("a request body is only valid for POST and PUT requests")
    if body:
        try:
            json.loads(body)
        except ValueError:
            parser.error("request body must be valid JSON")

    return CliOptions(
        method=namespace.method,
        path=namespace.path,
        params=tuple(params),
        body=body,
        no_transform=namespace.no_transform,
        api_version=namespace.api_version,
        api_key=namespace.api_key,
        api_host=namespace.api_host,
        dotenv_path=namespace.dotenv_path,
        log_level=LOG_LEVELS[namespace.log_level],
    )


def resolve_config(options: CliOptions) -> ZencoderConfig:
    """Combine environment configuration with command-line overrides.

    Raises:
        ValueError: If the environment or overrides do not form a valid configuration.

    """
    config = ZencoderConfig.from_environment()
    updates: dict[str, Any] = {}
    if options.api_key is not None:
        updates["api_key"] = options.api_key
    if options.api_host is not None:
        updates["api_host"] = HttpUrl(options.api_host)
    if not updates:
        return config
    return config.model_copy(update=updates)


async def run_async(options: CliOptions, *, console: Console | None = None) -> int:
    """Execute the request described by *options* and return the process exit code."""
    logger = _setup_logging(options.log_level)
    output = console or Console()

    dotenv_file = (
        str(options.dotenv_path) if options.dotenv_path is not None else find_dotenv(usecwd=True)
    )
    if dotenv_file:
        load_dotenv(dotenv_file, override=False)
        logger.info("Loaded environment from %s", dotenv_file)
    else:
        logger.debug("No .env file found; relying on process environment only")

    try:
        config = resolve_config(options)
    except (ValueError, ValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    logger.debug("API key %s", "set" if config.api_key else "unset")

    request_options = RequestOptions(
        api_version=options.api_version, no_transform=options.no_transform
    )
    try:
        async with ZencoderClient(config) as client:
            result = await _send(client, options, request_options)
    except InvalidStatusError as exc:
        logger.error("Zencoder rejected the request with status %s", exc.status)
        print(f"Zencoder returned HTTP {exc.status}", file=sys.stderr)
        for message in exc.errors:
            print(f"  - {message}", file=sys.stderr)
        return 1
    except ZencoderError as exc:
        logger.error("Zencoder client error: %s", exc)
        print(f"Zencoder client error: {exc}", file=sys.stderr)
        return 1
    output.print_json(data=result)
    return 0


async def _send(
    client: ZencoderClient, options: CliOptions, request_options: RequestOptions
) -> Any:
    if options.method == "GET":
        return await client.retrieve_data(options.path, dict(options.params), request_options)
    if options.method == "DELETE":
        return await client.delete_data(options.path, request_options)
    if options.method == "POST":
        return await client.create_data(options.path, options.body, request_options)
    return await client.update_data(options.path, options.body, request_options)


def _setup_logging(log_level: int) -> logging.Logger:
    """Configure logging and return the CLI logger.

    Reduces noise from network libraries at non-DEBUG levels.
    """
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if log_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
    return logging.getLogger("zencoder_client.cli")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the ``zencoder`` console script."""
    options = parse_cli_args(argv)
    try:
        exit_code = asyncio.run(run_async(options))
    except KeyboardInterrupt:
        exit_code = 130
    except Exception:  # noqa: BLE001
        traceback.print_exc(limit=1)
        exit_code = 1
    raise SystemExit(exit_code)
