"""
Pytest configuration and fixtures for errtree tests.

Specialized fixtures are organized in the fixtures/ directory:
- fixtures.trees: Sample error trees and their expected renderings
"""

import logging

import pytest

# Load fixture modules
pytest_plugins = [
    "tests.fixtures.trees",
]

ERRTREE_ENV_VARS = (
    "ERRTREE_MAX_DEPTH",
    "ERRTREE_MAX_FRAMES",
    "ERRTREE_COLOR",
    "ERRTREE_LOG_DIR",
)


@pytest.fixture(autouse=True)
def clean_errtree_env(monkeypatch):
    """Run every test with no ERRTREE_* overrides from the outer shell."""
    for name in ERRTREE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_errtree_logger():
    """Drop handlers added by setup_logging() so tests stay independent."""
    yield
    logger = logging.getLogger("errtree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
