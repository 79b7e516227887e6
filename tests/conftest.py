"""
Shared pytest fixtures and configuration for crab-core tests.

This module provides:
- src/ on sys.path so the package imports without installation
- Automatic unit/integration markers by location
- Settings cache and CRAB_* environment isolation between tests
- Quiet structlog output (panics are logged at critical)
"""

import os
import sys
from pathlib import Path

import pytest

# Ensure crab package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from crab.core.logging import configure_logging
from crab.core.settings import clear_settings_cache


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Drop CRAB_* variables and the cached settings around every test."""
    for key in [key for key in os.environ if key.startswith("CRAB_")]:
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Only render critical records, as JSON, during the test session."""
    configure_logging(level="CRITICAL", json_format=True, service="crab-tests")
    yield


@pytest.fixture
def borrow_checks(monkeypatch):
    """Enable debug borrow checks for one test."""
    monkeypatch.setenv("CRAB_DEBUG_BORROW_CHECKS", "1")
    clear_settings_cache()
    yield
