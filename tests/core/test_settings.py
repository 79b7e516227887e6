"""Tests for crab.core.settings module.

Covers:
- CrabSettings defaults
- CRAB_* environment overrides
- log_level validation
- get_settings caching
"""

import pytest
from pydantic import ValidationError

from crab.core.settings import CrabSettings, clear_settings_cache, get_settings


class TestCrabSettingsDefaults:
    def test_abort_on_panic_off(self):
        assert CrabSettings().abort_on_panic is False

    def test_panic_backtrace_off(self):
        assert CrabSettings().panic_backtrace is False

    def test_debug_borrow_checks_off(self):
        assert CrabSettings().debug_borrow_checks is False

    def test_log_level(self):
        assert CrabSettings().log_level == "WARNING"

    def test_json_logs_auto(self):
        assert CrabSettings().json_logs is None


class TestCrabSettingsEnvOverride:
    def test_abort_on_panic_from_env(self, monkeypatch):
        monkeypatch.setenv("CRAB_ABORT_ON_PANIC", "true")
        assert CrabSettings().abort_on_panic is True

    def test_debug_borrow_checks_from_env(self, monkeypatch):
        monkeypatch.setenv("CRAB_DEBUG_BORROW_CHECKS", "1")
        assert CrabSettings().debug_borrow_checks is True

    def test_json_logs_from_env(self, monkeypatch):
        monkeypatch.setenv("CRAB_JSON_LOGS", "false")
        assert CrabSettings().json_logs is False

    def test_unprefixed_variable_ignored(self, monkeypatch):
        monkeypatch.setenv("ABORT_ON_PANIC", "true")
        assert CrabSettings().abort_on_panic is False


class TestLogLevelValidation:
    def test_lowercase_normalised(self, monkeypatch):
        monkeypatch.setenv("CRAB_LOG_LEVEL", "debug")
        assert CrabSettings().log_level == "DEBUG"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            CrabSettings(log_level="LOUD")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self):
        first = get_settings()
        assert get_settings(_force_reload=True) is not first

    def test_clear_cache_picks_up_env(self, monkeypatch):
        assert get_settings().panic_backtrace is False
        monkeypatch.setenv("CRAB_PANIC_BACKTRACE", "true")
        assert get_settings().panic_backtrace is False
        clear_settings_cache()
        assert get_settings().panic_backtrace is True
