"""Live per-device configuration storage."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiosqlite

from rkconfig.store.codec import decode_config, encode_config
from rkconfig.store.db import Database, translate_errors
from rkconfig.store.schemas import DeviceConfigRow, DeviceIdentity, epoch_now

logger = logging.getLogger(__name__)

TABLE = "keyboard_configs"


def device_lock_key(device: DeviceIdentity) -> tuple[str, int, int]:
    """Lock key shared by every writer of one keyboard_configs row."""
    return (TABLE, device.vid, device.pid)


async def fetch_device_row(conn: aiosqlite.Connection, device: DeviceIdentity) -> aiosqlite.Row | None:
    async with conn.execute(
        """
        SELECT keyboard_vid, keyboard_pid, config_json, selected_profile_id, updated_at
        FROM keyboard_configs
        WHERE keyboard_vid=? AND keyboard_pid=?
        """,
        (device.vid, device.pid),
    ) as cursor:
        return await cursor.fetchone()


class DeviceConfigStore:
    """One row per keyboard holding its live config.

    Saving a config never changes which profile is selected for the device.
    """

    def __init__(self, db: Database, clock: Callable[[], int] = epoch_now) -> None:
        self._db = db
        self._clock = clock

    async def save_config(self, device: DeviceIdentity, config: Any) -> DeviceConfigRow:
        """Upsert the live config, carrying the current selection forward.

        A ``None`` config is rejected so that ``load_config`` returning None
        always means nothing was saved.
        """
        if config is None:
            raise ValueError("config must not be None; load_config returns None for devices with nothing saved")
        config_json = encode_config(config)

        async with self._db.key_lock(device_lock_key(device)):
            conn = await self._db.connection()
            with translate_errors("save_config"):
                existing = await fetch_device_row(conn, device)
                selected_profile_id = existing["selected_profile_id"] if existing else None
                now = self._clock()
                await conn.execute(
                    """
                    INSERT INTO keyboard_configs(keyboard_vid, keyboard_pid, config_json, selected_profile_id, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(keyboard_vid, keyboard_pid) DO UPDATE SET
                      config_json=excluded.config_json,
                      selected_profile_id=excluded.selected_profile_id,
                      updated_at=excluded.updated_at
                    """,
                    (device.vid, device.pid, config_json, selected_profile_id, now),
                )

        logger.debug("Config %s for %s", "updated" if existing else "created", device)
        return DeviceConfigRow(
            device=device,
            config=config,
            selected_profile_id=selected_profile_id,
            updated_at=now,
        )

    async def get_row(self, device: DeviceIdentity) -> DeviceConfigRow | None:
        """Return the full row for a device, or None if nothing was saved."""
        conn = await self._db.connection()
        with translate_errors("get_row"):
            row = await fetch_device_row(conn, device)
        if row is None:
            return None

        return DeviceConfigRow(
            device=device,
            config=decode_config(row["config_json"], TABLE, device),
            selected_profile_id=row["selected_profile_id"] or None,
            updated_at=int(row["updated_at"]),
        )

    async def load_config(self, device: DeviceIdentity) -> Any | None:
        """Return the stored config for a device, or None if nothing was saved."""
        row = await self.get_row(device)
        return row.config if row else None
