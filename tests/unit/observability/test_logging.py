"""Unit tests for structlog wiring."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from converge.config import ConvergeSettings
from converge.observability.logging import JsonLoggerFactory, Logger, get_logger


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        with structlog.testing.capture_logs() as logs:
            get_logger("converge.test", wait="action:m/1").info("poll.accepted", attempt=1)
        assert logs == [
            {"wait": "action:m/1", "attempt": 1, "event": "poll.accepted", "log_level": "info"}
        ]

    def test_satisfies_logger_protocol(self) -> None:
        log: Logger = get_logger("converge.test").bind(wait="w")
        for method in ("bind", "debug", "info", "warning", "error"):
            assert callable(getattr(log, method))


@pytest.mark.usefixtures("restore_logging")
class TestJsonLoggerFactory:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(logging.INFO)
        get_logger("converge.json").info("reconcile.grant", members=["carol"])
        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "reconcile.grant"
        assert record["members"] == ["carol"]
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filters_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure("WARNING")
        get_logger("converge.quiet").debug("poll.retry")
        assert "poll.retry" not in capsys.readouterr().err

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValueError):
            JsonLoggerFactory.configure("chatty")

    def test_settings_configure_logging(self) -> None:
        ConvergeSettings(log_level="debug", json_logs=False).configure_logging()
        assert logging.getLogger().level == logging.DEBUG


class TestEngineLogging:
    def test_retry_and_accept_events(self) -> None:
        from converge.polling import AssertOutcome, WaitConfig, wait_for

        values = iter(["pending", "done"])
        with structlog.testing.capture_logs() as logs:
            wait_for(WaitConfig(
                fetch=lambda _: next(values),
                input="k",
                assertions=(lambda v: None if v == "done" else AssertOutcome.retry("pending"),),
                interval=0,
                name="job",
            ))
        events = [entry["event"] for entry in logs]
        assert events == ["poll.retry", "poll.accepted"]
        assert all(entry["wait"] == "job" for entry in logs)
