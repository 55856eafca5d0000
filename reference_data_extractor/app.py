"""Application wiring for the Reference Data Extractor."""

from __future__ import annotations

from typing import Optional, Sequence

try:
    import tkinter as tk
except ImportError as exc:  # pragma: no cover - tkinter ships with CPython
    raise RuntimeError("Tkinter must be available to run the Reference Data Extractor") from exc

from .clipboard import TkClipboard
from .integrations.nominatim import NominatimSearchClient
from .logging_utils import configure_logging, get_logger, install_exception_logging
from .preferences import AppPreferences, parse_preferences
from .search import SearchCoordinator
from .state import QueryState
from .ui.search_window import SearchWindow
from .version import APP_NAME, APP_VERSION, display_version

_log = get_logger()


class ReferenceDataExtractorApp:
    """Coordinates state, the provider client, the coordinator and the window."""

    def __init__(self, preferences: AppPreferences, root: Optional[tk.Tk] = None) -> None:
        self.preferences = preferences
        self.state = QueryState(
            query=preferences.query,
            latitude=preferences.latitude,
            longitude=preferences.longitude,
        )
        self.client = NominatimSearchClient(
            endpoint=preferences.endpoint,
            timeout=preferences.timeout,
            limit=preferences.limit,
        )
        self.coordinator = SearchCoordinator(self.state, self.client)
        self.root = root or tk.Tk()
        self.clipboard = TkClipboard(self.root)
        self.window = SearchWindow(
            self.root,
            self.state,
            self.coordinator,
            self.clipboard,
            quote_export=preferences.quote_export,
            title=f"{APP_NAME} {display_version(APP_VERSION)}",
        )

    def run(self) -> None:
        _log.info(
            "Starting %s %s (endpoint=%s)",
            APP_NAME,
            APP_VERSION,
            self.preferences.endpoint,
        )
        self.root.mainloop()


def main(argv: Optional[Sequence[str]] = None) -> int:
    preferences = parse_preferences(argv)
    configure_logging(preferences.log_level)
    install_exception_logging()
    try:
        app = ReferenceDataExtractorApp(preferences)
    except tk.TclError as exc:
        _log.error("Unable to open the main window: %s", exc)
        return 1
    app.run()
    return 0


__all__ = ["ReferenceDataExtractorApp", "main"]
