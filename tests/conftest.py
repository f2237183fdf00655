"""Shared pytest fixtures for PomoDesk tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pomodesk.database.db import configure_engine, init_db
from pomodesk.timer.engine import TimerEngine

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    """Controllable wall clock, starting at 2026-01-01T00:00:00Z."""
    return FakeClock()


@pytest.fixture
def engine(qapp, clock):
    """Fresh TimerEngine with default settings on the fake clock."""
    eng = TimerEngine(parent=None, clock=clock)
    yield eng
    eng.dispose()


@pytest.fixture
def engine_auto(qapp, clock):
    """Fresh TimerEngine with auto_start_next ON."""
    eng = TimerEngine(parent=None, clock=clock)
    eng.update_settings({"auto_start_next": True})
    yield eng
    eng.dispose()
