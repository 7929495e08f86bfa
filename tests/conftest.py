from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from rkconfig.store import Database, DeviceConfigStore, DeviceIdentity, ProfileStore, SelectionManager


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def device() -> DeviceIdentity:
    return DeviceIdentity(vid=4, pid=10)


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncIterator[Database]:
    database = Database(db_path=tmp_path / "rk.db", timeout_seconds=2.0)
    yield database
    await database.close()


@pytest.fixture
def configs(db: Database, clock: FakeClock) -> DeviceConfigStore:
    return DeviceConfigStore(db, clock=clock)


@pytest.fixture
def profiles(db: Database, clock: FakeClock) -> ProfileStore:
    return ProfileStore(db, clock=clock)


@pytest.fixture
def selection(db: Database, clock: FakeClock) -> SelectionManager:
    return SelectionManager(db, clock=clock)
