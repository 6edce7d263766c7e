# tests/unit/core/test_logging.py
"""Tests for structured logging configuration."""

import json
import logging

import pytest


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_get_logger_returns_logger(self) -> None:
        """get_logger returns a bound logger."""
        from fuzzloom.core.logging import get_logger

        logger = get_logger("test")
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")
        assert hasattr(logger, "bind")

    def test_logger_outputs_structured_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON mode writes one JSON document per event to stderr."""
        from fuzzloom.core.logging import configure_logging, get_logger

        configure_logging(json_output=True)
        get_logger("test").info("Property failed", seed=5)

        captured = capsys.readouterr()
        data = json.loads(captured.err.strip().split("\n")[-1])
        assert data["event"] == "Property failed"
        assert data["seed"] == 5
        assert data["level"] == "info"
        assert "_record" not in data

    def test_logs_never_reach_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        """stdout is reserved for reports."""
        from fuzzloom.core.logging import configure_logging, get_logger

        configure_logging(json_output=True)
        get_logger("test").warning("Teardown failed, ignoring")

        assert capsys.readouterr().out == ""

    def test_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        from fuzzloom.core.logging import configure_logging, get_logger

        configure_logging(json_output=False)
        get_logger("test").info("Shrink finished", shrinks=3)

        captured = capsys.readouterr()
        assert "Shrink finished" in captured.err
        assert not captured.err.strip().startswith("{")

    def test_level_applied_to_root(self) -> None:
        from fuzzloom.core.logging import configure_logging

        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

        configure_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_stdlib_loggers_emit_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """stdlib loggers go through the same processor chain."""
        from fuzzloom.core.logging import configure_logging

        configure_logging(json_output=True)
        logging.getLogger("some.stdlib.module").warning("from stdlib")

        data = json.loads(capsys.readouterr().err.strip().split("\n")[-1])
        assert data["event"] == "from stdlib"

    def test_engine_events_use_configured_pipeline(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Engine modules log through get_logger, so their events render as JSON."""
        from fuzzloom import gen, run_property
        from fuzzloom.core.logging import configure_logging

        configure_logging(json_output=True)
        run_property(gen.integers(0, 10), lambda n: n < 1, seed=4, runs=50)

        events = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
        failed = [event for event in events if event["event"] == "Property failed"]
        assert len(failed) == 1
        assert failed[0]["seed"] == 4
