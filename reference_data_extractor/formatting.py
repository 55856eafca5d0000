"""Formatting helpers for status line text."""

from __future__ import annotations

from typing import Optional


def format_query_duration(duration: Optional[float]) -> str:
    """Return a short human-readable duration (e.g. ``850 ms``, ``1.25 s``)."""

    if duration is None:
        return ""
    if duration < 0:
        duration = 0.0
    if duration < 1:
        return f"{duration * 1000:.0f} ms"
    if duration < 10:
        return f"{duration:.2f} s"
    if duration < 60:
        return f"{duration:.1f} s"
    minutes = int(duration // 60)
    seconds = duration - minutes * 60
    if seconds >= 1:
        return f"{minutes}m {seconds:.0f}s"
    return f"{minutes}m"


def format_result_count(count: int) -> str:
    if count <= 0:
        return "No results"
    return f"{count} result" if count == 1 else f"{count} results"


def with_duration(message: str, duration: Optional[float]) -> str:
    formatted = format_query_duration(duration)
    if not formatted:
        return message
    return f"{message} (Query {formatted})" if message else f"Query {formatted}"


__all__ = ["format_query_duration", "format_result_count", "with_duration"]
