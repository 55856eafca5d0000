"""Tkinter user interface components."""

from .search_window import SearchWindow

__all__ = ["SearchWindow"]
