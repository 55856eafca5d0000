"""Search window: query form, results table and clipboard export."""

from __future__ import annotations

from typing import Optional, Tuple

try:
    import tkinter as tk
    from tkinter import ttk
except ImportError as exc:  # pragma: no cover - tkinter ships with CPython
    raise RuntimeError("Tkinter must be available to run the search window") from exc

from ..clipboard import Clipboard
from ..export import export_selection
from ..formatting import format_result_count, with_duration
from ..logging_utils import get_logger
from ..search import SearchCoordinator, SearchOutcome
from ..state import QueryState, set_selection

_log = get_logger("ui")

POLL_INTERVAL_MS = 100


class SearchWindow:
    """Main window that submits searches and renders their results."""

    COLUMNS = (
        ("name", "Name", 220),
        ("url", "URL", 260),
        ("latlong", "Lat/Long", 200),
    )

    def __init__(
        self,
        root: tk.Tk,
        state: QueryState,
        coordinator: SearchCoordinator,
        clipboard: Clipboard,
        *,
        quote_export: bool = False,
        title: str = "Reference Data Extractor",
    ) -> None:
        self._root = root
        self._state = state
        self._coordinator = coordinator
        self._clipboard = clipboard
        self._quote_export = quote_export

        self._root.title(title)
        self._root.minsize(720, 360)
        self._root.protocol("WM_DELETE_WINDOW", self.close)

        self._query_var = tk.StringVar(master=root, value=state.query)
        self._lat_var = tk.StringVar(master=root, value=state.latitude)
        self._lng_var = tk.StringVar(master=root, value=state.longitude)
        self._status_var = tk.StringVar(master=root, value="")

        self._results_frame: Optional[tk.Frame] = None
        self._results_tree: Optional[ttk.Treeview] = None
        self._copy_button: Optional[ttk.Button] = None
        self._result_poll_job: Optional[str] = None
        self._last_submitted: Optional[Tuple[str, str, str]] = None
        self._closed = False

        self._build_ui()
        self._schedule_result_poll()

    # ------------------------------------------------------------------
    # Window lifecycle helpers
    # ------------------------------------------------------------------
    @property
    def is_open(self) -> bool:
        return not self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._result_poll_job:
            try:
                self._root.after_cancel(self._result_poll_job)
            except tk.TclError:
                pass
        self._result_poll_job = None
        self._coordinator.shutdown()
        self._root.destroy()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        container = tk.Frame(self._root, highlightthickness=0, bd=0)
        container.pack(fill="both", expand=True, padx=12, pady=12)

        form = ttk.Frame(container, borderwidth=1, relief="groove", padding=6)
        form.pack(fill="x")
        form.columnconfigure(1, weight=1)

        fields = (
            ("Category", self._query_var),
            ("Latitude", self._lat_var),
            ("Longitude", self._lng_var),
        )
        for row, (label_text, variable) in enumerate(fields):
            label = ttk.Label(form, text=label_text, anchor="w")
            label.grid(row=row, column=0, sticky="w", padx=(0, 8), pady=2)
            entry = ttk.Entry(form, textvariable=variable)
            entry.grid(row=row, column=1, sticky="ew", pady=2)
            entry.bind("<Return>", self._handle_submit_event, add="+")
            entry.bind("<KP_Enter>", self._handle_submit_event, add="+")
            entry.bind("<FocusOut>", self._handle_focus_out, add="+")

        action_frame = tk.Frame(container, highlightthickness=0, bd=0)
        action_frame.pack(fill="x", pady=(8, 8))

        copy_button = ttk.Button(
            action_frame,
            text="Copy Selected Rows",
            command=self._copy_selection,
            state="disabled",
        )
        copy_button.pack(side="left")
        self._copy_button = copy_button

        status_label = tk.Label(action_frame, textvariable=self._status_var, anchor="w", justify="left")
        status_label.pack(side="left", fill="x", expand=True, padx=(12, 0))

        results_frame = tk.Frame(container, highlightthickness=0, bd=0)
        self._results_frame = results_frame

        columns = tuple(key for key, _, _ in self.COLUMNS)
        tree = ttk.Treeview(results_frame, columns=columns, show="headings", selectmode="extended")
        for key, heading, width in self.COLUMNS:
            tree.heading(key, text=heading)
            tree.column(key, width=width, anchor="w")

        tree_scroll = ttk.Scrollbar(results_frame, orient="vertical", command=tree.yview)
        tree.configure(yscrollcommand=tree_scroll.set)
        tree.pack(side="left", fill="both", expand=True)
        tree_scroll.pack(side="right", fill="y")

        tree.bind("<<TreeviewSelect>>", self._handle_selection_changed, add="+")
        tree.bind("<Control-c>", self._handle_copy_event, add="+")
        self._results_tree = tree

    # ------------------------------------------------------------------
    # Search + render
    # ------------------------------------------------------------------
    def _current_fields(self) -> Tuple[str, str, str]:
        return (self._query_var.get(), self._lat_var.get(), self._lng_var.get())

    def _handle_submit_event(self, _event: tk.Event) -> str:
        self._submit()
        return "break"

    def _handle_focus_out(self, _event: tk.Event) -> None:
        if self._last_submitted is not None and self._current_fields() == self._last_submitted:
            return
        self._submit()

    def _submit(self) -> None:
        if not self.is_open:
            return
        fields = self._current_fields()
        self._last_submitted = fields
        query, latitude, longitude = fields

        handle = self._coordinator.search(query, latitude, longitude)
        if handle is None:
            self._status_var.set("Invalid coordinates")
            return

        self._status_var.set(f"Searching for '{query.strip()}' near {latitude.strip()}, {longitude.strip()}...")
        self._render_results()
        self._schedule_result_poll()

    def _render_results(self) -> None:
        tree = self._results_tree
        frame = self._results_frame
        if tree is None or frame is None:
            return

        results = self._state.results
        if results is None:
            frame.pack_forget()
            return
        if not frame.winfo_manager():
            frame.pack(fill="both", expand=True)

        tree.delete(*tree.get_children())
        for record in results:
            tree.insert("", "end", iid=record.id, values=(record.name, record.url, record.coordinate_label))
        self._update_copy_button()

    def _handle_search_outcome(self, outcome: SearchOutcome) -> None:
        if outcome.kind == "success":
            self._render_results()
            message = format_result_count(len(outcome.records))
        elif outcome.kind == "provider_error":
            message = "Search failed"
        else:
            message = "Search failed: unexpected error"
        self._status_var.set(with_duration(message, outcome.duration))

    def _schedule_result_poll(self) -> None:
        if not self.is_open or self._result_poll_job:
            return
        self._result_poll_job = self._root.after(POLL_INTERVAL_MS, self._poll_search_results)

    def _poll_search_results(self) -> None:
        self._result_poll_job = None
        if not self.is_open:
            return

        for outcome in self._coordinator.poll_results():
            try:
                self._handle_search_outcome(outcome)
            except tk.TclError:
                _log.exception("Failed to render search results")

        self._schedule_result_poll()

    # ------------------------------------------------------------------
    # Selection + export
    # ------------------------------------------------------------------
    def _handle_selection_changed(self, _event: tk.Event) -> None:
        if self._results_tree is None:
            return
        set_selection(self._state, self._results_tree.selection())
        self._update_copy_button()

    def _update_copy_button(self) -> None:
        if self._copy_button is None:
            return
        self._copy_button.configure(state="normal" if self._state.selection else "disabled")

    def _handle_copy_event(self, _event: tk.Event) -> str:
        self._copy_selection()
        return "break"

    def _copy_selection(self) -> None:
        payload = export_selection(self._state, self._clipboard, quoted=self._quote_export)
        if payload is None:
            return
        count = len(self._state.selection)
        self._status_var.set(f"Copied {count} row{'s' if count != 1 else ''} to clipboard")


__all__ = ["SearchWindow"]
