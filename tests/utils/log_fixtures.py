# tests/utils/log_fixtures.py
"""Reusable fixtures for testing the app logger."""

import uuid

import pytest

import sass_make.logs as mod_logs

from .patch_everywhere import patch_everywhere


def _suffix() -> str:
    return "_" + uuid.uuid4().hex[:6]


@pytest.fixture
def direct_logger() -> mod_logs.AppLogger:
    """Create a brand-new AppLogger with no shared state.

    This fixture does NOT affect get_app_logger(); it is a clean logger
    instance for testing the logger itself, or for handing to the compiler
    as its log sink.
    """
    logger = mod_logs.AppLogger(f"test_logger{_suffix()}", enable_color=False)
    logger.setLevel("trace")
    return logger


@pytest.fixture
def module_logger(monkeypatch: pytest.MonkeyPatch) -> mod_logs.AppLogger:
    """Replace get_app_logger() everywhere with a new isolated instance.

    Automatically reverts after test completion.
    """
    new_logger = mod_logs.AppLogger(f"isolated_logger{_suffix()}", enable_color=False)
    new_logger.setLevel("trace")
    patch_everywhere(monkeypatch, mod_logs, "get_app_logger", lambda: new_logger)
    return new_logger
