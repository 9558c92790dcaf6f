"""Tests for logging_config.py module."""

import io
import logging

import colorlog
import pytest

from ircengine.logging_config import LOG_COLORS, LoggerConfigurator, configure_logging
from ircengine.logs.logger import logger as engine_logger


@pytest.fixture(autouse=True)
def restore_engine_handlers():
    target = engine_logger.logger
    saved_handlers = list(target.handlers)
    saved_propagate = target.propagate
    yield
    target.handlers = saved_handlers
    target.propagate = saved_propagate


def make_record(level, msg="test"):
    return logging.LogRecord(
        name="ircengine", level=level, pathname="", lineno=0, msg=msg, args=(), exc_info=None
    )


class TestFormatter:
    """Tests for the colorlog formatter built by the configurator."""

    @pytest.fixture
    def formatter(self):
        return LoggerConfigurator(debug=False).build_formatter()

    def test_formatter_is_colorlog(self, formatter):
        assert isinstance(formatter, colorlog.ColoredFormatter)

    def test_info_is_green(self, formatter):
        formatted = formatter.format(make_record(logging.INFO))
        assert "\033[32m" in formatted
        assert "INFO" in formatted

    def test_error_message_is_red(self, formatter):
        formatted = formatter.format(make_record(logging.ERROR, "boom"))
        assert formatted.count("\033[31m") >= 2
        assert "boom" in formatted

    def test_level_colors_cover_all_levels(self):
        assert set(LOG_COLORS) == {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class TestLoggerConfigurator:
    """Tests for handler installation."""

    def test_configure_installs_single_handler(self):
        stream = io.StringIO()
        configurator = LoggerConfigurator(debug=False, stream=stream)
        first = configurator.configure()
        second = configurator.configure()

        handlers = [h for h in engine_logger.logger.handlers if getattr(h, "_ircengine_handler", False)]
        assert handlers == [second]
        assert first is not second
        assert engine_logger.logger.propagate is False

    def test_configure_writes_events_to_stream(self):
        stream = io.StringIO()
        LoggerConfigurator(debug=False, stream=stream).configure()

        engine_logger.log_event("session", "parted", nick="tester", channel="#test")

        output = stream.getvalue()
        assert "Left channel" in output
        assert "[tester#test" in output

    def test_debug_flag_sets_level(self):
        LoggerConfigurator(debug=True, stream=io.StringIO()).configure()
        assert engine_logger.logger.level == logging.DEBUG
        assert engine_logger.debug is True

    def test_debug_defaults_to_environment(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "1")
        assert LoggerConfigurator().debug is True
        monkeypatch.setenv("DEBUG", "no")
        assert LoggerConfigurator().debug is False

    def test_configure_logging_helper(self):
        handler = configure_logging(debug=False)
        assert handler in engine_logger.logger.handlers
        assert engine_logger.logger.level == logging.INFO
