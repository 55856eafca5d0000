"""Search nearby points of interest and copy them as CSV."""

from __future__ import annotations

from .version import APP_VERSION, display_version

__version__ = APP_VERSION

__all__ = ["APP_VERSION", "__version__", "display_version"]
