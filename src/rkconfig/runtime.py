"""Store context factory used at process start."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rkconfig.config import AppSettings, load_settings
from rkconfig.logging_config import setup_logging
from rkconfig.store import Database, DeviceConfigStore, ProfileStore, SelectionManager
from rkconfig.store.schemas import epoch_now


@dataclass
class StoreContext:
    """The storage handle plus the components that share it."""

    settings: AppSettings
    db: Database
    configs: DeviceConfigStore
    profiles: ProfileStore
    selection: SelectionManager

    async def open(self) -> None:
        await self.db.connection()

    async def close(self) -> None:
        await self.db.close()

    async def __aenter__(self) -> StoreContext:
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def create_store_context(
    config_path: str | Path | None = None,
    db_path: str | Path | None = None,
    clock: Callable[[], int] = epoch_now,
) -> StoreContext:
    """Build the shared database handle and wire the store components to it."""
    settings = load_settings(config_path)
    setup_logging(settings.logging)

    db = Database(
        db_path=db_path or settings.storage.db_path,
        timeout_seconds=settings.storage.timeout_seconds,
        journal_mode=settings.storage.journal_mode,
    )
    return StoreContext(
        settings=settings,
        db=db,
        configs=DeviceConfigStore(db, clock=clock),
        profiles=ProfileStore(db, clock=clock),
        selection=SelectionManager(db, clock=clock),
    )
