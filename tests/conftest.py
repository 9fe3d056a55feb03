# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from aurelius_bot.core.storage import JSONStorage
from aurelius_bot.data.store import StreamStore

from .fakes import Clock, FakeMirror


@pytest.fixture()
def clock() -> Clock:
    return Clock()


@pytest.fixture()
def storage(tmp_path: Path) -> JSONStorage:
    return JSONStorage(tmp_path / "data.json")


@pytest.fixture()
def mirror() -> FakeMirror:
    return FakeMirror()


@pytest.fixture()
def store(storage: JSONStorage, mirror: FakeMirror, clock: Clock) -> StreamStore:
    """Store wired to the fake mirror but signed out (local only)."""
    return StreamStore(storage, mirror, clock=clock)
