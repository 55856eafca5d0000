"""System clipboard access through Tk."""

from __future__ import annotations

from typing import Protocol

try:
    import tkinter as tk
except ImportError as exc:  # pragma: no cover - tkinter ships with CPython
    raise RuntimeError("Tkinter must be available to use the clipboard") from exc

from .logging_utils import get_logger

_log = get_logger("clipboard")


class Clipboard(Protocol):
    def write_text(self, payload: str) -> None:
        ...


class TkClipboard:
    """Write plain text to the clipboard owned by a Tk widget.

    The write is scheduled with ``after_idle`` so it always runs on the Tk
    main loop, replacing whatever the clipboard held before.
    """

    def __init__(self, widget: tk.Misc) -> None:
        self._widget = widget

    def write_text(self, payload: str) -> None:
        self._widget.after_idle(self._write, payload)

    def _write(self, payload: str) -> None:
        try:
            self._widget.clipboard_clear()
            self._widget.clipboard_append(payload)
        except tk.TclError:
            _log.exception("Failed to copy export to clipboard")


__all__ = ["Clipboard", "TkClipboard"]
