"""Tests for settings.py, config.py and logging_setup.py."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from kbblocks.config import COLUMN_LIMITS
from kbblocks.errors import ConfigurationError
from kbblocks.logging_setup import configure_logging
from kbblocks.settings import Settings, _env_int, _env_path


class TestSettings:
    """Environment-driven settings."""

    def test_env_int(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KBBLOCKS_TEST_INT", "42")
        assert _env_int("KBBLOCKS_TEST_INT", 1) == 42

    def test_env_int_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KBBLOCKS_TEST_INT", "lots")
        assert _env_int("KBBLOCKS_TEST_INT", 7) == 7
        monkeypatch.delenv("KBBLOCKS_TEST_INT")
        assert _env_int("KBBLOCKS_TEST_INT", 7) == 7

    def test_env_path(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("KBBLOCKS_TEST_PATH", str(tmp_path / "kb.log"))
        assert _env_path("KBBLOCKS_TEST_PATH") == tmp_path / "kb.log"
        monkeypatch.delenv("KBBLOCKS_TEST_PATH")
        assert _env_path("KBBLOCKS_TEST_PATH") is None

    def test_settings_are_frozen(self) -> None:
        cfg = Settings(log_level="DEBUG")
        with pytest.raises(AttributeError):
            cfg.log_level = "INFO"

    def test_column_limits(self) -> None:
        assert COLUMN_LIMITS.MIN_COLUMNS == 2
        assert COLUMN_LIMITS.MAX_COLUMNS == 5
        assert COLUMN_LIMITS.MIN_WIDTH + COLUMN_LIMITS.MAX_WIDTH == COLUMN_LIMITS.TOTAL_WIDTH


class TestConfigureLogging:
    """Handler installation on the package logger."""

    def test_console_only_by_default(self) -> None:
        logger = configure_logging(Settings(log_level="INFO", log_path=None))
        assert logger.name == "kbblocks"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert not logger.propagate

    def test_file_handler(self, tmp_path: Path) -> None:
        log_path = tmp_path / "logs" / "kb.log"
        logger = configure_logging(Settings(log_level="DEBUG", log_path=log_path))

        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1

        logging.getLogger("kbblocks.engine").debug("move ignored: %s", "block-9")
        file_handlers[0].flush()
        assert "move ignored: block-9" in log_path.read_text(encoding="utf-8")

    def test_second_call_is_noop_unless_forced(self) -> None:
        configure_logging(Settings(log_level="INFO", log_path=None))
        logger = configure_logging(level="DEBUG")
        assert logger.level == logging.INFO

        logger = configure_logging(level="DEBUG", force=True)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_unknown_level(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            configure_logging(level="chatty")
        assert exc_info.value.context["setting"] == "log_level"
