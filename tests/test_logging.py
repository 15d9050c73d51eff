"""
Tests for logging setup.
"""

import logging

from profile_gateway.config import logfire_config


def test_console_only_without_token(fresh_logging, monkeypatch):
    def fail(**kwargs):
        raise AssertionError("logfire.configure should not be called")

    monkeypatch.setattr(logfire_config.logfire, "configure", fail)

    logfire_config.setup_logfire(token=None, enabled=True, level="DEBUG")

    assert logfire_config.is_logfire_enabled() is False
    assert logging.getLogger().level == logging.DEBUG


def test_setup_runs_once(fresh_logging):
    root = logging.getLogger()
    before = len(root.handlers)

    logfire_config.setup_logfire()
    logfire_config.setup_logfire()

    assert len(root.handlers) == before + 1


def test_logfire_export_when_enabled(fresh_logging, monkeypatch):
    configured = {}
    monkeypatch.setattr(logfire_config.logfire, "configure", lambda **kw: configured.update(kw))
    monkeypatch.setattr(logfire_config.logfire, "LogfireLoggingHandler", logging.NullHandler)

    logfire_config.setup_logfire(token="tok", enabled=True)

    assert configured["token"] == "tok"
    assert configured["service_name"] == "profile-gateway"
    assert logfire_config.is_logfire_enabled() is True


def test_safe_span_is_noop_when_disabled(fresh_logging):
    with logfire_config.safe_span("profiles.list", table="profiles"):
        value = 42

    assert value == 42
