"""
Tests for the structured event logger
"""

import logging

import pytest

from ircengine.logs.event_catalog import EVENT_TEMPLATES, reload_event_templates
from ircengine.logs.logger import EngineLogger


@pytest.fixture
def engine_logger(caplog):
    log = EngineLogger("engine.test")
    caplog.set_level(logging.DEBUG, logger="engine.test")
    return log


class TestEventCatalog:
    """Template catalog loading"""

    def test_bundled_templates_loaded(self):
        assert ("connection", "disconnected") in EVENT_TEMPLATES
        assert ("dispatch", "callback_error") in EVENT_TEMPLATES

    def test_reload_from_custom_file_then_restore(self, tmp_path):
        path = tmp_path / "templates.json"
        path.write_text('{"custom": {"thing": "hello {who}"}}', encoding="utf-8")
        try:
            reload_event_templates(path)
            assert EVENT_TEMPLATES == {("custom", "thing"): "hello {who}"}
        finally:
            reload_event_templates()
        assert ("session", "registered") in EVENT_TEMPLATES

    def test_missing_file_records_load_error(self, tmp_path):
        try:
            reload_event_templates(tmp_path / "nope.json")
            assert ("app", "load_error") in EVENT_TEMPLATES
        finally:
            reload_event_templates()


class TestLogEvent:
    """Message layout"""

    def test_template_is_rendered(self, engine_logger, caplog):
        engine_logger.set_debug(False)
        engine_logger.log_event(
            "connection", "disconnected", host="irc.example.net", port=6667, reason="EOF"
        )
        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert "Disconnected from irc.example.net:6667: EOF" in record.getMessage()
        assert record.getMessage().startswith("[engine")

    def test_nick_and_channel_build_prefix(self, engine_logger, caplog):
        engine_logger.set_debug(False)
        engine_logger.log_event("session", "parted", nick="tester", channel="#test")
        assert caplog.records[-1].getMessage().startswith("[tester#test")

    def test_unknown_event_derives_text(self, engine_logger, caplog):
        engine_logger.set_debug(False)
        engine_logger.log_event("some_domain", "odd_thing")
        assert "some domain: odd thing" in caplog.records[-1].getMessage()

    def test_missing_template_field_falls_back_to_raw_template(self, engine_logger, caplog):
        engine_logger.set_debug(False)
        engine_logger.log_event("connection", "connect_start", host="h")
        assert "{port}" in caplog.records[-1].getMessage()

    def test_debug_layout_includes_event_name_and_context(self, engine_logger, caplog):
        engine_logger.set_debug(True)
        engine_logger.log_event(
            "session", "registered", nick="tester", flushed=2, level=logging.DEBUG
        )
        message = caplog.records[-1].getMessage()
        assert message.startswith("session_registered")
        assert "flushed=2" in message
        assert "nick=" not in message

    def test_debug_switch_from_environment(self, engine_logger, caplog, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        engine_logger.log_event("session", "parted")
        assert caplog.records[-1].getMessage().startswith("session_parted")

    def test_disabled_level_is_skipped(self, engine_logger, caplog):
        engine_logger.set_debug(False)
        engine_logger.log_event("session", "state_change", level=logging.DEBUG)
        assert caplog.records == []

    def test_explicit_human_text_wins(self, engine_logger, caplog):
        engine_logger.set_debug(False)
        engine_logger.log_event("session", "parted", human="custom text")
        assert caplog.records[-1].getMessage().endswith("custom text")
