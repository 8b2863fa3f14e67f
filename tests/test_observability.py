"""
Tests for observability — logging setup and the action log sink.
"""

import logging
from pathlib import Path

import pytest

from unitctl.core.observability.logging_config import (
    ACTION_LOGGER,
    setup_action_log,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_logging():
    """Put the root and action loggers back the way they were."""
    root = logging.getLogger()
    actions = logging.getLogger(ACTION_LOGGER)
    saved = (root.handlers[:], root.level, actions.handlers[:], actions.level, actions.propagate)
    yield
    for logger in (root, actions):
        for handler in logger.handlers:
            if handler not in saved[0] + saved[2]:
                handler.close()
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    actions.handlers[:] = saved[2]
    actions.setLevel(saved[3])
    actions.propagate = saved[4]


class TestSetupLogging:
    def test_level_applied(self):
        setup_logging(level="INFO")
        assert logging.getLogger().level == logging.INFO

    def test_unknown_level_falls_back_to_warning(self):
        setup_logging(level="LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_log_file(self, tmp_path: Path):
        log_file = tmp_path / "debug.log"
        setup_logging(level="WARNING", log_file=str(log_file), log_file_level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        logging.getLogger("unitctl.test").debug("to the file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "to the file" in log_file.read_text()

    def test_action_log_discarded_by_default(self):
        setup_logging(level="DEBUG")
        actions = logging.getLogger(ACTION_LOGGER)
        assert actions.propagate is False
        assert all(isinstance(h, logging.NullHandler) for h in actions.handlers)


class TestActionLog:
    def test_writes_to_file(self, tmp_path: Path):
        target = tmp_path / "nested" / "actions.log"
        logger = setup_action_log(target)
        logger.info("[alpha] | hello")
        for handler in logger.handlers:
            handler.flush()
        assert "[alpha] | hello" in target.read_text()

    def test_does_not_reach_root(self, tmp_path: Path, caplog):
        setup_action_log(tmp_path / "actions.log")
        with caplog.at_level(logging.INFO):
            logging.getLogger(ACTION_LOGGER).info("raw program output")
        assert "raw program output" not in caplog.text

    def test_replaces_previous_handlers(self, tmp_path: Path):
        setup_action_log(tmp_path / "one.log")
        logger = setup_action_log(tmp_path / "two.log")
        assert len(logger.handlers) == 1
        logger.info("second")
        for handler in logger.handlers:
            handler.flush()
        assert "second" in (tmp_path / "two.log").read_text()
        assert "second" not in (tmp_path / "one.log").read_text()
