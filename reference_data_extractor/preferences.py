"""Command-line preference parsing for the Reference Data Extractor."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .integrations.nominatim import DEFAULT_ENDPOINT, DEFAULT_RESULT_LIMIT, DEFAULT_TIMEOUT, MAX_RESULT_LIMIT
from .logging_utils import coerce_log_level, get_logger
from .state import DEFAULT_LATITUDE, DEFAULT_LONGITUDE, DEFAULT_QUERY
from .version import APP_NAME, APP_VERSION


_log = get_logger("preferences")


def clamp_timeout(value: object, default: float = DEFAULT_TIMEOUT) -> float:
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        timeout = default
    if timeout != timeout:  # NaN
        timeout = default
    return max(1.0, min(60.0, timeout))


def clamp_result_limit(value: object, default: int = DEFAULT_RESULT_LIMIT) -> int:
    try:
        limit = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        limit = default
    return max(1, min(MAX_RESULT_LIMIT, limit))


@dataclass(frozen=True)
class AppPreferences:
    query: str = DEFAULT_QUERY
    latitude: str = DEFAULT_LATITUDE
    longitude: str = DEFAULT_LONGITUDE
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = float(DEFAULT_TIMEOUT)
    limit: int = DEFAULT_RESULT_LIMIT
    quote_export: bool = False
    log_level: int = logging.WARNING


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reference-data-extractor",
        description="Search for nearby points of interest and copy them as CSV.",
    )
    parser.add_argument("--query", default=DEFAULT_QUERY, help="Initial category or business name.")
    parser.add_argument("--lat", default=DEFAULT_LATITUDE, help="Initial latitude.")
    parser.add_argument("--lng", default=DEFAULT_LONGITUDE, help="Initial longitude.")
    parser.add_argument(
        "--endpoint",
        default=DEFAULT_ENDPOINT,
        help="Nominatim base URL (default: %(default)s).",
    )
    parser.add_argument(
        "--timeout",
        default=str(DEFAULT_TIMEOUT),
        help="Request timeout in seconds, 1-60 (default: %(default)s).",
    )
    parser.add_argument(
        "--limit",
        default=str(DEFAULT_RESULT_LIMIT),
        help=f"Maximum results per search, 1-{MAX_RESULT_LIMIT} (default: %(default)s).",
    )
    parser.add_argument(
        "--quote-export",
        action="store_true",
        help="Quote exported fields that contain commas or quotes.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level name or number (default: %(default)s).",
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def parse_preferences(argv: Optional[Sequence[str]] = None) -> AppPreferences:
    args = build_parser().parse_args(argv)

    log_level = coerce_log_level(args.log_level)
    if log_level is None:
        _log.warning("Unknown log level %r; using WARNING", args.log_level)
        log_level = logging.WARNING

    endpoint = (args.endpoint or "").strip() or DEFAULT_ENDPOINT

    return AppPreferences(
        query=args.query,
        latitude=args.lat,
        longitude=args.lng,
        endpoint=endpoint,
        timeout=clamp_timeout(args.timeout),
        limit=clamp_result_limit(args.limit),
        quote_export=bool(args.quote_export),
        log_level=log_level,
    )


__all__ = [
    "AppPreferences",
    "build_parser",
    "clamp_result_limit",
    "clamp_timeout",
    "parse_preferences",
]
