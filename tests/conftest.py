"""Shared fixtures."""
from pathlib import Path

import pytest

from arithmetic_history_service.server.history_store import HistoryStore


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a history database inside a not-yet-existing data directory."""
    return tmp_path / "data" / "calc-history.db"


@pytest.fixture
def store(db_path: Path):
    """An initialised history store backed by a temporary file."""
    history_store = HistoryStore(db_path)
    history_store.init()
    yield history_store
    history_store.close()
