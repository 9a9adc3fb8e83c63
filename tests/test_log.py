from __future__ import annotations

import json

import pytest

from twigsdc.utils.log import LEVEL_ENV, configure_logging, get_logger


def test_json_format_writes_events_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("debug", "json")
    try:
        get_logger("twigsdc.test").info("templates_loaded", count=3)
        line = capsys.readouterr().err.strip().splitlines()[-1]
    finally:
        configure_logging()

    event = json.loads(line)
    assert event["event"] == "templates_loaded"
    assert event["count"] == 3
    assert event["level"] == "info"


def test_level_from_environment_filters_events(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv(LEVEL_ENV, "ERROR")
    configure_logging(fmt="json")
    try:
        get_logger("twigsdc.test").warning("walk_failed", directory="/nowhere")
        captured = capsys.readouterr().err
    finally:
        monkeypatch.delenv(LEVEL_ENV)
        configure_logging()

    assert "walk_failed" not in captured
