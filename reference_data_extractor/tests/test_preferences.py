import logging

from reference_data_extractor.integrations.nominatim import DEFAULT_ENDPOINT
from reference_data_extractor.preferences import (
    clamp_result_limit,
    clamp_timeout,
    parse_preferences,
)


def test_defaults() -> None:
    prefs = parse_preferences([])

    assert prefs.query == "Coffee"
    assert prefs.latitude == "54.5973"
    assert prefs.longitude == "-5.9301"
    assert prefs.endpoint == DEFAULT_ENDPOINT
    assert prefs.timeout == 10.0
    assert prefs.limit == 40
    assert prefs.quote_export is False
    assert prefs.log_level == logging.WARNING


def test_overrides() -> None:
    prefs = parse_preferences(
        [
            "--query", "Bakery",
            "--lat", "51.5",
            "--lng", "-0.12",
            "--endpoint", "https://nominatim.example",
            "--timeout", "5",
            "--limit", "10",
            "--quote-export",
            "--log-level", "debug",
        ]
    )

    assert prefs.query == "Bakery"
    assert prefs.latitude == "51.5"
    assert prefs.longitude == "-0.12"
    assert prefs.endpoint == "https://nominatim.example"
    assert prefs.timeout == 5.0
    assert prefs.limit == 10
    assert prefs.quote_export is True
    assert prefs.log_level == logging.DEBUG


def test_invalid_values_fall_back() -> None:
    prefs = parse_preferences(["--timeout", "soon", "--limit", "many", "--log-level", "chatty", "--endpoint", " "])

    assert prefs.timeout == 10.0
    assert prefs.limit == 40
    assert prefs.log_level == logging.WARNING
    assert prefs.endpoint == DEFAULT_ENDPOINT


def test_clamps() -> None:
    assert clamp_timeout(0) == 1.0
    assert clamp_timeout(600) == 60.0
    assert clamp_timeout("nan") == 10.0
    assert clamp_result_limit(-3) == 1
    assert clamp_result_limit(100) == 40
    assert clamp_result_limit("12") == 12
