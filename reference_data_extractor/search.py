"""Search coordination: one cancellable provider request at a time."""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .integrations.nominatim import (
    NominatimSearchClient,
    ProviderError,
    SearchRegion,
    build_search_region,
    parse_coordinate,
)
from .logging_utils import get_logger
from .state import QueryState, ResultRecord, clear_results, replace_results

_log = get_logger("search")


@dataclass(frozen=True)
class SearchOutcome:
    """Result of a finished search as applied to the query state."""

    token: int
    kind: str  # success | provider_error | error
    records: Tuple[ResultRecord, ...] = ()
    message: str = ""
    duration: Optional[float] = None


class SearchHandle:
    """Handle for an issued search that can be cancelled before it lands."""

    def __init__(self, token: int, query: str, region: SearchRegion) -> None:
        self.token = token
        self.query = query
        self.region = region
        self.started_at = time.perf_counter()
        self._cancelled = threading.Event()
        self._done = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker finished (or was abandoned)."""

        return self._done.wait(timeout)

    def _mark_done(self) -> None:
        self._done.set()


class SearchCoordinator:
    """Issue provider searches and apply only the newest one's outcome.

    ``search`` runs on the UI thread and starts a worker thread. Workers post
    ``(token, outcome)`` pairs to a queue; ``poll_results`` drains it on the UI
    thread and applies an outcome only if its handle is still the active,
    uncancelled one.
    """

    def __init__(self, state: QueryState, client: NominatimSearchClient) -> None:
        self._state = state
        self._client = client
        self._search_token: int = 0
        self._active: Optional[SearchHandle] = None
        self._result_queue: "queue.Queue[tuple[int, SearchOutcome]]" = queue.Queue()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def active_handle(self) -> Optional[SearchHandle]:
        return self._active

    def search(self, query: str, latitude: str, longitude: str) -> Optional[SearchHandle]:
        lat = parse_coordinate(latitude)
        lng = parse_coordinate(longitude)
        if lat is None or lng is None:
            _log.debug("Ignoring search with invalid coordinates: lat=%r lng=%r", latitude, longitude)
            return None

        self._state.query = query
        self._state.latitude = latitude
        self._state.longitude = longitude
        clear_results(self._state)

        if self._active is not None:
            _log.debug("Cancelling in-flight search token=%s", self._active.token)
            self._active.cancel()

        self._search_token += 1
        handle = SearchHandle(self._search_token, query, build_search_region(lat, lng))
        self._active = handle

        thread = threading.Thread(
            target=self._search_worker,
            args=(handle,),
            name=f"rde-search-{handle.token}",
            daemon=True,
        )
        thread.start()
        return handle

    def poll_results(self) -> List[SearchOutcome]:
        """Apply queued outcomes belonging to the active search; call on the UI thread."""

        applied: List[SearchOutcome] = []
        while True:
            try:
                token, outcome = self._result_queue.get_nowait()
            except queue.Empty:
                break
            if self._apply_outcome(token, outcome):
                applied.append(outcome)
        return applied

    def shutdown(self) -> None:
        if self._active is not None:
            self._active.cancel()
        self._active = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _apply_outcome(self, token: int, outcome: SearchOutcome) -> bool:
        active = self._active
        if active is None or active.token != token or active.cancelled:
            _log.debug("Discarding outcome for superseded search token=%s", token)
            return False

        self._active = None
        if outcome.kind == "success":
            replace_results(self._state, outcome.records)
        return True

    def _search_worker(self, handle: SearchHandle) -> None:
        try:
            items = self._client.search(handle.query, handle.region)
            records = tuple(
                ResultRecord.from_provider(item.name, item.url, item.latitude, item.longitude)
                for item in items
            )
            outcome = SearchOutcome(
                token=handle.token,
                kind="success",
                records=records,
                duration=time.perf_counter() - handle.started_at,
            )
            if _log.isEnabledFor(logging.DEBUG):
                _log.debug("Mapped results: %s", [record.to_dict() for record in records])
        except ProviderError as exc:
            _log.debug("Search token=%s failed: %s", handle.token, exc)
            outcome = SearchOutcome(
                token=handle.token,
                kind="provider_error",
                message=str(exc),
                duration=time.perf_counter() - handle.started_at,
            )
        except Exception as exc:
            _log.exception("Unexpected error during search token=%s", handle.token)
            outcome = SearchOutcome(
                token=handle.token,
                kind="error",
                message=str(exc),
                duration=time.perf_counter() - handle.started_at,
            )

        try:
            if handle.cancelled:
                _log.debug("Search token=%s finished after cancellation", handle.token)
                return
            self._result_queue.put_nowait((handle.token, outcome))
        finally:
            handle._mark_done()


__all__ = ["SearchCoordinator", "SearchHandle", "SearchOutcome"]
