"""Shared pytest fixtures for Typing RPG tests."""

import sys
from datetime import datetime, timezone

import pytest

from PyQt6.QtCore import QCoreApplication

from typerpg.database.db import configure_engine, init_db
from typerpg.engine.keystrokes import TypingEngine
from typerpg.settings import Settings

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def now():
    """Noon UTC: twelve hours until the daily reset."""
    return datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine(qapp, clock):
    """TypingEngine on the passage ``"cat dog"``."""
    return TypingEngine("cat dog", clock=clock)


@pytest.fixture
def instant_settings():
    """No cosmetic delays: the next passage loads immediately."""
    return Settings(next_quote_delay_ms=0, new_text_delay_ms=0)
