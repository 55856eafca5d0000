"""Serialize the selected results into clipboard text."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING, Iterable, Optional

from .logging_utils import get_logger
from .state import QueryState, ResultRecord, selected_records

if TYPE_CHECKING:
    from .clipboard import Clipboard

_log = get_logger("export")

EXPORT_HEADER = ("name", "url", "latlong")
_CURLY_APOSTROPHE = "’"


def normalize_apostrophes(text: str) -> str:
    return text.replace(_CURLY_APOSTROPHE, "'")


def build_export_payload(records: Iterable[ResultRecord], *, quoted: bool = False) -> str:
    """Return ``name,url,latlong`` text with one line per record.

    Fields are joined verbatim unless ``quoted`` is set, in which case the
    ``csv`` module quotes values that contain separators or quotes.
    """

    rows = [EXPORT_HEADER]
    rows.extend((record.name, record.url, record.coordinate_label) for record in records)

    if quoted:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerows(rows)
        payload = buffer.getvalue()
    else:
        payload = "".join(",".join(row) + "\n" for row in rows)
    return normalize_apostrophes(payload)


def export_selection(
    state: QueryState,
    clipboard: Clipboard,
    *,
    quoted: bool = False,
) -> Optional[str]:
    """Copy the selected rows to the clipboard; returns the payload if written."""

    records = selected_records(state)
    if not records:
        return None

    payload = build_export_payload(records, quoted=quoted)
    clipboard.write_text(payload)
    _log.debug("Exported %d row(s) to clipboard", len(records))
    return payload


__all__ = [
    "EXPORT_HEADER",
    "build_export_payload",
    "export_selection",
    "normalize_apostrophes",
]
