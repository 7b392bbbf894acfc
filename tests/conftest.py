"""
Shared fixtures for the test suite.
"""

import logging

import pytest

import fretboard
from fretboard.config import CONFIG_ENV_VAR
from fretboard.data.schema import Voicing
from fretboard.logger import LOGGER_NAME
from fretboard.rules.voicing_store import VoicingStore


@pytest.fixture(autouse=True)
def isolated_logger():
    """Drop handlers the CLI attaches so they never outlive a test's stderr."""
    yield
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_fretboard_handler", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def fresh_config(monkeypatch):
    """Run a test without $FRETBOARD_CONFIG and with empty caches on both sides."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    fretboard.clear_caches()
    yield monkeypatch
    fretboard.clear_caches()


@pytest.fixture
def empty_store():
    return VoicingStore([])


@pytest.fixture
def small_store():
    """C major, C7 and C9 plus one D major, in that order."""
    return VoicingStore([
        ("C", "major", [Voicing(frets=["x", 3, 2, 0, 1, 0], label="Open")]),
        ("C", "7", [Voicing(frets=["x", 3, 2, 3, 1, 0], label="Open")]),
        ("C", "9", [Voicing(frets=["x", 3, 2, 3, 3, 0], label="Open")]),
        ("D", "major", [Voicing(frets=["x", "x", 0, 2, 3, 2], label="Open")]),
    ])
