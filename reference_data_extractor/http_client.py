"""Shared HTTP session for provider lookups."""

from __future__ import annotations

from typing import Optional

import requests

from .version import APP_VERSION

_SESSION: Optional[requests.Session] = None
_APP_AGENT = f"ReferenceDataExtractor/{APP_VERSION}"


def _build_user_agent(existing: Optional[str]) -> str:
    candidate = (existing or "").strip()
    if candidate and _APP_AGENT in candidate:
        return candidate
    if candidate:
        return f"{candidate} {_APP_AGENT}"
    return _APP_AGENT


def get_shared_session() -> requests.Session:
    """Return the shared requests session carrying the application User-Agent."""

    global _SESSION
    if _SESSION is None:
        session = requests.Session()
        session.headers["User-Agent"] = _build_user_agent(session.headers.get("User-Agent"))
        session.headers["Accept"] = "application/json"
        _SESSION = session
    return _SESSION


__all__ = ["get_shared_session"]
