from typing import Any, Dict, List, Optional, Tuple

import pytest

pytest.importorskip("tkinter")

from reference_data_extractor.search import SearchOutcome  # noqa: E402
from reference_data_extractor.state import (  # noqa: E402
    QueryState,
    ResultRecord,
    clear_results,
    replace_results,
)
from reference_data_extractor.ui.search_window import SearchWindow  # noqa: E402


class _FakeVar:
    def __init__(self, value: str = "") -> None:
        self._value = value

    def get(self) -> str:
        return self._value

    def set(self, value: str) -> None:
        self._value = value


class _FakeButton:
    def __init__(self) -> None:
        self.state = "disabled"

    def configure(self, **options: Any) -> None:
        self.state = options.get("state", self.state)


class _FakeFrame:
    def __init__(self) -> None:
        self.packed = False

    def winfo_manager(self) -> str:
        return "pack" if self.packed else ""

    def pack(self, **_options: Any) -> None:
        self.packed = True

    def pack_forget(self) -> None:
        self.packed = False


class _FakeTree:
    def __init__(self) -> None:
        self.rows: Dict[str, Tuple[str, ...]] = {}
        self.selected: Tuple[str, ...] = ()

    def get_children(self) -> Tuple[str, ...]:
        return tuple(self.rows)

    def delete(self, *items: str) -> None:
        for item in items:
            self.rows.pop(item, None)

    def insert(self, _parent: str, _index: str, iid: str, values: Tuple[str, ...]) -> str:
        self.rows[iid] = values
        return iid

    def selection(self) -> Tuple[str, ...]:
        return self.selected


class _FakeRoot:
    def __init__(self) -> None:
        self.scheduled: List[int] = []

    def after(self, delay: int, _func: Any) -> str:
        self.scheduled.append(delay)
        return f"after#{len(self.scheduled)}"


class _StubCoordinator:
    """Mimics SearchCoordinator.search without threads or network."""

    def __init__(self, state: QueryState) -> None:
        self.state = state
        self.calls: List[Tuple[str, str, str]] = []

    def search(self, query: str, latitude: str, longitude: str) -> Optional[object]:
        self.calls.append((query, latitude, longitude))
        try:
            float(latitude)
            float(longitude)
        except ValueError:
            return None
        clear_results(self.state)
        return object()


class _FakeClipboard:
    def __init__(self) -> None:
        self.writes: List[str] = []

    def write_text(self, payload: str) -> None:
        self.writes.append(payload)


def _build_window(state: QueryState) -> SearchWindow:
    window = SearchWindow.__new__(SearchWindow)
    window._root = _FakeRoot()
    window._state = state
    window._coordinator = _StubCoordinator(state)
    window._clipboard = _FakeClipboard()
    window._quote_export = False
    window._query_var = _FakeVar(state.query)
    window._lat_var = _FakeVar(state.latitude)
    window._lng_var = _FakeVar(state.longitude)
    window._status_var = _FakeVar()
    window._results_frame = _FakeFrame()
    window._results_tree = _FakeTree()
    window._copy_button = _FakeButton()
    window._result_poll_job = None
    window._last_submitted = None
    window._closed = False
    return window


def _records() -> List[ResultRecord]:
    return [
        ResultRecord(name="Joe’s", url="http://x", coordinate_label="1|2"),
        ResultRecord(name="Y", url="http://y", coordinate_label="5|6"),
        ResultRecord(name="Z", url="http://z", coordinate_label="3|4"),
    ]


def test_invalid_coordinates_report_status_and_keep_table_hidden() -> None:
    state = QueryState()
    window = _build_window(state)
    window._lat_var.set("north")

    window._submit()

    assert window._status_var.get() == "Invalid coordinates"
    assert state.results is None
    assert window._results_frame.packed is False


def test_submit_shows_empty_table_while_searching() -> None:
    state = QueryState()
    window = _build_window(state)

    window._submit()

    assert window._status_var.get() == "Searching for 'Coffee' near 54.5973, -5.9301..."
    assert state.results == []
    assert window._results_frame.packed is True
    assert window._results_tree.rows == {}
    assert window._root.scheduled == [100]


def test_focus_out_only_resubmits_changed_fields() -> None:
    state = QueryState()
    window = _build_window(state)

    window._submit()
    window._handle_focus_out(None)
    window._query_var.set("Bakery")
    window._handle_focus_out(None)

    assert [call[0] for call in window._coordinator.calls] == ["Coffee", "Bakery"]


@pytest.mark.parametrize(
    "outcome, expected",
    [
        (SearchOutcome(token=1, kind="success"), "No results"),
        (SearchOutcome(token=1, kind="provider_error", message="unexpected status 503"), "Search failed"),
        (SearchOutcome(token=1, kind="error", message="boom", duration=0.5), "Search failed: unexpected error (Query 500 ms)"),
    ],
)
def test_outcome_status_messages(outcome: SearchOutcome, expected: str) -> None:
    state = QueryState()
    clear_results(state)
    window = _build_window(state)

    window._handle_search_outcome(outcome)

    assert window._status_var.get() == expected


def test_success_renders_rows_in_order() -> None:
    state = QueryState()
    records = _records()
    replace_results(state, records)
    window = _build_window(state)

    window._handle_search_outcome(SearchOutcome(token=1, kind="success", records=tuple(records), duration=1.5))

    assert list(window._results_tree.rows) == [record.id for record in records]
    assert window._results_tree.rows[records[0].id] == ("Joe’s", "http://x", "1|2")
    assert window._status_var.get() == "3 results (Query 1.50 s)"


def test_copy_button_tracks_selection_and_exports() -> None:
    state = QueryState()
    a, b, c = records = _records()
    replace_results(state, records)
    window = _build_window(state)
    window._render_results()
    assert window._copy_button.state == "disabled"

    window._results_tree.selected = (c.id, a.id)
    window._handle_selection_changed(None)
    assert window._copy_button.state == "normal"

    window._copy_selection()

    assert window._clipboard.writes == ["name,url,latlong\nJoe's,http://x,1|2\nZ,http://z,3|4\n"]
    assert window._status_var.get() == "Copied 2 rows to clipboard"

    window._results_tree.selected = ()
    window._handle_selection_changed(None)
    assert window._copy_button.state == "disabled"


def test_copy_with_empty_selection_does_nothing() -> None:
    state = QueryState()
    replace_results(state, _records())
    window = _build_window(state)
    window._status_var.set("3 results")

    window._copy_selection()

    assert window._clipboard.writes == []
    assert window._status_var.get() == "3 results"
