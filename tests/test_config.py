"""Tests for settings and logging setup."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from config import Settings, configure_logging


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.log_level == "INFO"
        assert settings.max_sessions == 1000
        assert settings.title == "Keypad Calculator API"

    def test_from_env(self):
        settings = Settings.from_env({
            "CALCULATOR_LOG_LEVEL": "debug",
            "CALCULATOR_MAX_SESSIONS": "5",
            "CALCULATOR_TITLE": "Desk Calc",
            "UNRELATED": "ignored",
        })
        assert settings.log_level == "DEBUG"
        assert settings.max_sessions == 5
        assert settings.title == "Desk Calc"

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("CALCULATOR_MAX_SESSIONS", "7")
        assert Settings.from_env().max_sessions == 7

    @pytest.mark.parametrize(
        "env",
        [
            {"CALCULATOR_LOG_LEVEL": "loud"},
            {"CALCULATOR_MAX_SESSIONS": "0"},
            {"CALCULATOR_MAX_SESSIONS": "many"},
            {"CALCULATOR_TITLE": ""},
        ],
    )
    def test_invalid(self, env):
        with pytest.raises(ValidationError):
            Settings.from_env(env)


class TestConfigureLogging:

    def test_sets_level(self):
        logger = configure_logging("WARNING")
        assert logger.name == "calculator"
        assert logger.level == logging.WARNING

    def test_idempotent(self):
        logger = configure_logging("INFO")
        handlers = list(logger.handlers)
        configure_logging("INFO")
        assert logger.handlers == handlers
        assert len(handlers) == 1

    def test_reducer_logs_under_namespace(self, caplog):
        from calculator import handle_action
        from models import CalculatorState

        configure_logging("DEBUG")
        with caplog.at_level(logging.DEBUG, logger="calculator"):
            handle_action(CalculatorState(), "digit", "4")
        assert any(r.name == "calculator.reducer" for r in caplog.records)
