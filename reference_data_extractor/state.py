"""Dataclasses that hold the search inputs, results and table selection."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set


UNKNOWN_NAME = "Unknown Name"
UNKNOWN_URL = "Unknown URL"

DEFAULT_QUERY = "Coffee"
DEFAULT_LATITUDE = "54.5973"
DEFAULT_LONGITUDE = "-5.9301"


def format_coordinate_label(latitude: float, longitude: float) -> str:
    """Return the pipe-delimited ``lat|lng`` label shown in the table."""

    return f"{latitude!r}|{longitude!r}"


def _new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ResultRecord:
    """One mapped search hit ready for display and export."""

    name: str
    url: str
    coordinate_label: str
    id: str = field(default_factory=_new_record_id, compare=False)

    @classmethod
    def from_provider(
        cls,
        name: Optional[str],
        url: Optional[str],
        latitude: float,
        longitude: float,
    ) -> "ResultRecord":
        return cls(
            name=name or UNKNOWN_NAME,
            url=url or UNKNOWN_URL,
            coordinate_label=format_coordinate_label(latitude, longitude),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "url": self.url,
            "placemark": self.coordinate_label,
        }


@dataclass
class QueryState:
    """Represents the UI-owned search inputs, result collection and selection.

    ``results`` is ``None`` until the first search starts; an empty list means
    a search has started (or finished) without results.
    """

    query: str = DEFAULT_QUERY
    latitude: str = DEFAULT_LATITUDE
    longitude: str = DEFAULT_LONGITUDE
    results: Optional[List[ResultRecord]] = None
    selection: Set[str] = field(default_factory=set)


def clear_results(state: QueryState) -> None:
    """Mark a search as in progress: empty (not absent) results, no selection."""

    state.results = []
    state.selection = set()


def replace_results(state: QueryState, records: Iterable[ResultRecord]) -> None:
    """Swap in a new result collection; selections never carry over."""

    state.results = list(records)
    state.selection = set()


def set_selection(state: QueryState, record_ids: Iterable[str]) -> None:
    """Store the selection, dropping ids that are not in the current results."""

    known = {record.id for record in state.results or ()}
    state.selection = {record_id for record_id in record_ids if record_id in known}


def selected_records(state: QueryState) -> List[ResultRecord]:
    """Return the selected records in result-collection order."""

    if not state.results or not state.selection:
        return []
    return [record for record in state.results if record.id in state.selection]


__all__ = [
    "DEFAULT_LATITUDE",
    "DEFAULT_LONGITUDE",
    "DEFAULT_QUERY",
    "QueryState",
    "ResultRecord",
    "UNKNOWN_NAME",
    "UNKNOWN_URL",
    "clear_results",
    "format_coordinate_label",
    "replace_results",
    "selected_records",
    "set_selection",
]
