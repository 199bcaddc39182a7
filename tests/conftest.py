"""
Shared pytest fixtures and configuration for stackorigin tests.

This module provides:
- Import paths for the package and the fixed-position fixture modules
- Autouse cleanup of process-wide state (stack hook, frame limit, settings,
  structlog configuration) for test isolation
"""

import os
import sys
from pathlib import Path

import pytest
import structlog

# Ensure stackorigin and the fixture modules are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))

from stackorigin.core.settings import reset_settings
from stackorigin.stack import hooks, parser


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without an explicit marker as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# State Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _restore_stack_hook():
    """Put the default stack-trace hook and frame limit back after every test."""
    yield
    hooks.set_prepare_stack_trace(None)
    hooks.stack_trace_limit = None


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    """Drop cached settings and STACKORIGIN_* variables around every test."""
    for key in list(os.environ):
        if key.startswith("STACKORIGIN_"):
            monkeypatch.delenv(key)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo structlog configuration made by a test."""
    yield
    structlog.reset_defaults()
    # Module-level loggers cache their bound logger once configured with
    # cache_logger_on_first_use; rebind them so later tests see the defaults.
    hooks.logger = structlog.get_logger(hooks.__name__)
    parser.logger = structlog.get_logger(parser.__name__)


@pytest.fixture
def default_hook():
    """The hook installed before the test body runs."""
    return hooks.get_prepare_stack_trace()
