"""Client for querying points of interest from OpenStreetMap Nominatim."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import requests

from ..http_client import get_shared_session
from ..logging_utils import get_logger

_log = get_logger("nominatim")

DEFAULT_ENDPOINT = "https://nominatim.openstreetmap.org"
DEFAULT_TIMEOUT = 10
DEFAULT_RESULT_LIMIT = 40
MAX_RESULT_LIMIT = 40
SEARCH_SPAN_DEGREES = 0.05

_URL_TAGS = ("website", "contact:website", "url")


class ProviderError(RuntimeError):
    """Raised when the provider request fails or returns an unusable payload."""


@dataclass(frozen=True)
class SearchRegion:
    """A fixed-span bounding box centred on a coordinate."""

    center_latitude: float
    center_longitude: float
    latitude_delta: float = SEARCH_SPAN_DEGREES
    longitude_delta: float = SEARCH_SPAN_DEGREES

    @property
    def viewbox(self) -> Tuple[float, float, float, float]:
        """Return ``(left, top, right, bottom)`` as Nominatim expects."""

        half_lat = self.latitude_delta / 2
        half_lng = self.longitude_delta / 2
        return (
            self.center_longitude - half_lng,
            self.center_latitude + half_lat,
            self.center_longitude + half_lng,
            self.center_latitude - half_lat,
        )


@dataclass(frozen=True)
class ProviderItem:
    """Represents a single point of interest returned by the provider."""

    latitude: float
    longitude: float
    name: Optional[str] = None
    url: Optional[str] = None


def build_search_region(latitude: float, longitude: float) -> SearchRegion:
    return SearchRegion(center_latitude=latitude, center_longitude=longitude)


def parse_coordinate(value: object) -> Optional[float]:
    """Parse a decimal coordinate string, rejecting non-finite values."""

    if isinstance(value, str):
        value = value.strip()
        # float() also accepts digit groupings such as "5_4.5"
        if "_" in value:
            return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


class NominatimSearchClient:
    """Encapsulates Nominatim free-text searches bounded to a region."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        limit: int = DEFAULT_RESULT_LIMIT,
    ) -> None:
        self._session = session or get_shared_session()
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._limit = max(1, min(MAX_RESULT_LIMIT, int(limit)))

    def search(self, query: str, region: SearchRegion) -> List[ProviderItem]:
        url = f"{self._endpoint}/search"
        params = self._build_params(query, region)
        _log.debug("Nominatim search request: url=%s params=%s", url, params)
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            raise ProviderError(f"request failed: {exc}") from exc

        if response.status_code != 200:
            raise ProviderError(f"unexpected status {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("invalid JSON in response") from exc

        if not isinstance(data, list):
            raise ProviderError(f"unexpected payload type {type(data).__name__}")

        items: List[ProviderItem] = []
        skipped = 0
        for entry in data:
            item = self._parse_item(entry)
            if item is None:
                skipped += 1
                continue
            items.append(item)
        if skipped:
            _log.debug("Nominatim search skipped %s entr(y/ies) without coordinates", skipped)
        _log.debug("Nominatim search query=%r returned %d item(s)", query, len(items))
        return items

    def _build_params(self, query: str, region: SearchRegion) -> Dict[str, object]:
        left, top, right, bottom = region.viewbox
        return {
            "q": query,
            "format": "jsonv2",
            "viewbox": f"{left},{top},{right},{bottom}",
            "bounded": 1,
            "extratags": 1,
            "limit": self._limit,
        }

    @staticmethod
    def _parse_item(entry: object) -> Optional[ProviderItem]:
        if not isinstance(entry, dict):
            return None
        latitude = parse_coordinate(entry.get("lat"))
        longitude = parse_coordinate(entry.get("lon"))
        if latitude is None or longitude is None:
            return None

        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            name = None

        url = None
        extratags = entry.get("extratags")
        if isinstance(extratags, dict):
            for tag in _URL_TAGS:
                value = extratags.get(tag)
                if isinstance(value, str) and value.strip():
                    url = value.strip()
                    break

        return ProviderItem(latitude=latitude, longitude=longitude, name=name, url=url)


__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_RESULT_LIMIT",
    "DEFAULT_TIMEOUT",
    "MAX_RESULT_LIMIT",
    "NominatimSearchClient",
    "ProviderError",
    "ProviderItem",
    "SEARCH_SPAN_DEGREES",
    "SearchRegion",
    "build_search_region",
    "parse_coordinate",
]
