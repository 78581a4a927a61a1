"""
Shared test configuration and fixtures.

Provides a framed store and a backlog bound to a per-test temporary
file, so tests never touch the working directory.
"""

from pathlib import Path

import pytest

from tribble_store import Backlog, FramedFileStore


@pytest.fixture
def store(tmp_path: Path) -> FramedFileStore:
    """Framed store on a file that does not exist yet."""
    return FramedFileStore(tmp_path / "backlog")


@pytest.fixture
def backlog(store: FramedFileStore) -> Backlog:
    """Backlog on top of the store fixture."""
    return Backlog(store)
