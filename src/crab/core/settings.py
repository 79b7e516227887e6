"""Runtime settings for crab-core.

Manifesto:
    Panics, borrow checks and log output are process-wide decisions. They
    are read once from the environment, validated, and cached, instead of
    being scattered across module-level globals.

    - **Pydantic validation:** Type-checked when first loaded
    - **Environment-driven:** ``CRAB_*`` environment variables and ``.env`` files
    - **Sensible defaults:** Panics raise (so test runners can observe them),
      borrow checks are off, logging is quiet

Features:
    - **CrabSettings:** abort_on_panic, panic_backtrace, debug_borrow_checks,
      log_level, json_logs
    - **get_settings():** Cached accessor
    - **clear_settings_cache():** Reset for tests

Examples:
    >>> from crab.core.settings import get_settings
    >>> get_settings().abort_on_panic
    False

Tags:
    settings, configuration, pydantic, environment, crab-core
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CrabSettings(BaseSettings):
    """crab-core configuration.

    Fields
    ──────
    abort_on_panic      : Terminate the process with os.abort() on panic
    panic_backtrace     : Attach the current stack to panic diagnostics
    debug_borrow_checks : Detect use of str views invalidated by String mutation
    log_level           : Structlog log level
    json_logs           : JSON renderer (True), console (False), auto (None)
    """

    model_config = SettingsConfigDict(
        env_prefix="CRAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Panics ───────────────────────────────────────────────────
    abort_on_panic: bool = Field(
        default=False,
        description="Abort the process instead of raising Panic",
    )
    panic_backtrace: bool = False

    # ── Strings ──────────────────────────────────────────────────
    debug_borrow_checks: bool = Field(
        default=False,
        description="Panic when a str view outlives a reallocation of its String",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "WARNING"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


_settings_cache: dict[str, CrabSettings] = {}


def get_settings(*, _force_reload: bool = False) -> CrabSettings:
    """Load, validate, and cache a :class:`CrabSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = CrabSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = ["CrabSettings", "get_settings", "clear_settings_cache"]
