"""Helper utilities for the application's logging setup."""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path
from types import TracebackType
from typing import Optional

PACKAGE_NAME = Path(__file__).resolve().parent.name

BASE_LOGGER = logging.getLogger(PACKAGE_NAME)
BASE_LOGGER.propagate = True

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"

_EXCEPTION_HOOKS_INSTALLED = False
_STREAM_HANDLER: Optional[logging.Handler] = None
_DEFAULT_THREAD_PREFIXES = ("rde-",)


def get_logger(suffix: str | None = None) -> logging.Logger:
    """Return the shared application logger or one of its children."""

    if suffix is None:
        return BASE_LOGGER
    logger = BASE_LOGGER.getChild(suffix)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    return logger


def set_log_level(level: int) -> None:
    """Update the base logger level (and implicitly its children)."""

    BASE_LOGGER.setLevel(level)


def coerce_log_level(value: object) -> Optional[int]:
    """Turn ``"debug"``, ``"10"`` or ``10`` into a logging level."""

    if isinstance(value, int):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        if candidate.isdigit():
            return int(candidate)
        level = logging.getLevelName(candidate.upper())
        return level if isinstance(level, int) else None
    return None


def configure_logging(level: int = logging.WARNING) -> None:
    """Attach a stderr handler to the base logger once."""

    global _STREAM_HANDLER
    if _STREAM_HANDLER is None:
        _STREAM_HANDLER = logging.StreamHandler()
        _STREAM_HANDLER.setFormatter(logging.Formatter(LOG_FORMAT))
        BASE_LOGGER.addHandler(_STREAM_HANDLER)
    set_log_level(level)


def _raised_in_package(tb: TracebackType | None) -> bool:
    while tb is not None:
        if PACKAGE_NAME in tb.tb_frame.f_code.co_filename:
            return True
        tb = tb.tb_next
    return False


def install_exception_logging(logger: logging.Logger | None = None) -> None:
    """Log unhandled exceptions from search workers and package code."""

    global _EXCEPTION_HOOKS_INSTALLED
    if _EXCEPTION_HOOKS_INSTALLED:
        return

    target = logger or BASE_LOGGER
    prior_thread_hook = threading.excepthook
    prior_sys_hook = sys.excepthook

    def _thread_hook(args: threading.ExceptHookArgs) -> None:
        name = args.thread.name if args.thread is not None else "<unnamed>"
        if name.startswith(_DEFAULT_THREAD_PREFIXES) or _raised_in_package(args.exc_traceback):
            exc_info = (args.exc_type, args.exc_value, args.exc_traceback)
            target.error("Unhandled exception in thread %s", name, exc_info=exc_info)
        prior_thread_hook(args)

    def _sys_hook(
        exc_type: type[BaseException],
        exc_value: BaseException,
        exc_traceback: TracebackType | None,
    ) -> None:
        if _raised_in_package(exc_traceback):
            target.error("Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback))
        prior_sys_hook(exc_type, exc_value, exc_traceback)

    threading.excepthook = _thread_hook
    sys.excepthook = _sys_hook
    _EXCEPTION_HOOKS_INSTALLED = True


__all__ = [
    "BASE_LOGGER",
    "coerce_log_level",
    "configure_logging",
    "get_logger",
    "install_exception_logging",
    "set_log_level",
]
