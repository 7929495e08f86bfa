"""Active profile selection per device."""

from __future__ import annotations

import logging
from collections.abc import Callable

from rkconfig.store.db import Database, translate_errors
from rkconfig.store.device_configs import device_lock_key
from rkconfig.store.schemas import DeviceIdentity, epoch_now

logger = logging.getLogger(__name__)

EMPTY_CONFIG_JSON = "{}"


class SelectionManager:
    """Tracks which profile is active on each device.

    The selection lives in the ``selected_profile_id`` column of
    ``keyboard_configs``. It is not checked against ``profiles``, and
    deleting a profile leaves a dangling id that callers detect with a
    failed ``ProfileStore.get_profile`` lookup.
    """

    def __init__(self, db: Database, clock: Callable[[], int] = epoch_now) -> None:
        self._db = db
        self._clock = clock

    async def set_selected_profile(self, device: DeviceIdentity, profile_id: str | None) -> None:
        """Set or clear (None / "") the selection without touching the config or its updated_at."""
        profile_id = profile_id or None
        async with self._db.key_lock(device_lock_key(device)):
            conn = await self._db.connection()
            with translate_errors("set_selected_profile"):
                await conn.execute(
                    """
                    INSERT INTO keyboard_configs(keyboard_vid, keyboard_pid, config_json, selected_profile_id, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(keyboard_vid, keyboard_pid) DO UPDATE SET
                      selected_profile_id=excluded.selected_profile_id
                    """,
                    (device.vid, device.pid, EMPTY_CONFIG_JSON, profile_id, self._clock()),
                )

        logger.debug("Selected profile for %s: %s", device, profile_id)

    async def get_selected_profile(self, device: DeviceIdentity) -> str | None:
        conn = await self._db.connection()
        with translate_errors("get_selected_profile"):
            async with conn.execute(
                "SELECT selected_profile_id FROM keyboard_configs WHERE keyboard_vid=? AND keyboard_pid=?",
                (device.vid, device.pid),
            ) as cursor:
                row = await cursor.fetchone()

        if row is None:
            return None
        return row["selected_profile_id"] or None
