"""Shared fixtures for store tests."""

import logging
import sqlite3
from pathlib import Path

import pytest

import pomolite
from pomolite.store import StoreHandle


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers the CLI installs so they do not outlive a test."""
    yield
    logger = logging.getLogger("pomolite")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Path of a store file that does not exist yet."""
    return tmp_path / "pomolite.db"


@pytest.fixture
def handle(store_path: Path):
    """Open handle on a fresh store, closed after the test."""
    with pomolite.open(store_path) as h:
        yield h


@pytest.fixture
def bootstrapped(handle: StoreHandle) -> StoreHandle:
    """Handle on a store that has been initialized."""
    result = handle.initialize()
    assert result.successful(), handle.message()
    return handle


class StatementRecorder:
    """Collects every SQL statement a handle's connection runs."""

    __test__ = False

    def __init__(self, handle: StoreHandle):
        self.statements: list[str] = []
        handle._conn.set_trace_callback(self.statements.append)

    def writes(self) -> list[str]:
        """Statements that change schema or data."""
        keywords = ("CREATE", "INSERT", "UPDATE", "DELETE", "DROP", "ALTER")
        return [s for s in self.statements if s.lstrip().upper().startswith(keywords)]


@pytest.fixture
def recorder():
    """Factory attaching a StatementRecorder to a handle."""
    return StatementRecorder


def raw_connect(path: Path) -> sqlite3.Connection:
    """Plain connection for inspecting or preparing a store outside pomolite."""
    return sqlite3.connect(path)
