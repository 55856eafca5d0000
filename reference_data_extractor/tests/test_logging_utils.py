import logging
import sys
import threading
from typing import List

import pytest

import reference_data_extractor.logging_utils as logging_utils
from reference_data_extractor.logging_utils import coerce_log_level, get_logger


def test_get_logger_returns_children_of_base() -> None:
    assert get_logger() is logging_utils.BASE_LOGGER
    assert get_logger("search").name == f"{logging_utils.PACKAGE_NAME}.search"


def test_coerce_log_level() -> None:
    assert coerce_log_level(10) == logging.DEBUG
    assert coerce_log_level("info") == logging.INFO
    assert coerce_log_level("30") == logging.WARNING
    assert coerce_log_level("chatty") is None
    assert coerce_log_level("") is None
    assert coerce_log_level(None) is None


def test_worker_thread_exceptions_are_logged(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    forwarded: List[str] = []
    monkeypatch.setattr(threading, "excepthook", lambda args: forwarded.append(args.thread.name))
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(logging_utils, "_EXCEPTION_HOOKS_INSTALLED", False)

    logging_utils.install_exception_logging()

    def _boom() -> None:
        raise RuntimeError("worker failed")

    with caplog.at_level(logging.ERROR):
        thread = threading.Thread(target=_boom, name="rde-search-7")
        thread.start()
        thread.join()

    assert "Unhandled exception in thread rde-search-7" in caplog.text
    assert forwarded == ["rde-search-7"]
