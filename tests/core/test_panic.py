"""Tests for crab.core.panic module."""

import pytest
from structlog.testing import capture_logs

from crab.core.panic import PANIC_PREFIX, Panic, panic
from crab.core.settings import clear_settings_cache


class TestPanic:
    """Test the default raising behaviour."""

    def test_raises_panic(self):
        """panic raises Panic with the fixed prefix."""
        with pytest.raises(Panic) as exc_info:
            panic("boom")
        assert str(exc_info.value) == "Panic encountered: boom"
        assert exc_info.value.message == "boom"

    def test_prefix_constant(self):
        """The prefix is shared with callers that match on it."""
        assert PANIC_PREFIX == "Panic encountered: "

    def test_is_base_exception(self):
        """Panic escapes ``except Exception``."""
        assert issubclass(Panic, BaseException)
        assert not issubclass(Panic, Exception)

    def test_cause_is_chained(self):
        """cause becomes __cause__."""
        cause = ValueError("inner")
        with pytest.raises(Panic) as exc_info:
            panic("outer", cause=cause)
        assert exc_info.value.__cause__ is cause

    def test_repr(self):
        """repr shows the bare message."""
        assert repr(Panic("boom")) == "Panic('boom')"


class TestPanicLogging:
    """Test that panics are logged."""

    def test_logged_at_critical(self):
        """Every panic emits a critical record."""
        with capture_logs() as logs:
            with pytest.raises(Panic):
                panic("boom")
        assert logs[0]["event"] == "panic"
        assert logs[0]["log_level"] == "critical"
        assert logs[0]["message"] == "boom"
        assert logs[0]["backtrace"] is None

    def test_backtrace_when_enabled(self, monkeypatch):
        """CRAB_PANIC_BACKTRACE attaches the stack."""
        monkeypatch.setenv("CRAB_PANIC_BACKTRACE", "true")
        clear_settings_cache()
        with capture_logs() as logs:
            with pytest.raises(Panic):
                panic("boom")
        assert "test_backtrace_when_enabled" in logs[0]["backtrace"]


class TestAbortOnPanic:
    """Test the process-terminating mode."""

    def test_abort_writes_diagnostic(self, monkeypatch, capsys):
        """With CRAB_ABORT_ON_PANIC the diagnostic goes to stderr before abort."""
        aborted = []

        def fake_abort():
            aborted.append(True)
            raise SystemExit(134)

        monkeypatch.setenv("CRAB_ABORT_ON_PANIC", "1")
        monkeypatch.setattr("crab.core.panic.os.abort", fake_abort)
        clear_settings_cache()

        with pytest.raises(SystemExit):
            panic("fatal")

        assert aborted == [True]
        assert "Panic encountered: fatal" in capsys.readouterr().err
