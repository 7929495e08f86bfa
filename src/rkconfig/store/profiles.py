"""Named per-device configuration profiles."""

from __future__ import annotations

import logging
from collections.abc import Callable

import aiosqlite

from rkconfig.store.codec import decode_config, encode_config
from rkconfig.store.db import Database, translate_errors
from rkconfig.store.schemas import DeviceIdentity, Profile, epoch_now

logger = logging.getLogger(__name__)

TABLE = "profiles"

PROFILE_COLUMNS = "id, name, keyboard_vid, keyboard_pid, config_json, created_at, updated_at"


def _lock_key(profile_id: str) -> tuple[str, str]:
    return (TABLE, profile_id)


def _row_to_profile(row: aiosqlite.Row) -> Profile:
    return Profile(
        id=row["id"],
        name=row["name"],
        device=DeviceIdentity(vid=row["keyboard_vid"], pid=row["keyboard_pid"]),
        config=decode_config(row["config_json"], TABLE, row["id"]),
        created_at=int(row["created_at"]),
        updated_at=int(row["updated_at"]),
    )


class ProfileStore:
    """CRUD over profiles keyed by caller-supplied id."""

    def __init__(self, db: Database, clock: Callable[[], int] = epoch_now) -> None:
        self._db = db
        self._clock = clock

    async def list_profiles(self, device: DeviceIdentity) -> list[Profile]:
        """Profiles for one device, most recently saved first."""
        conn = await self._db.connection()
        with translate_errors("list_profiles"):
            async with conn.execute(
                f"""
                SELECT {PROFILE_COLUMNS}
                FROM profiles
                WHERE keyboard_vid=? AND keyboard_pid=?
                ORDER BY updated_at DESC, created_at DESC, id ASC
                """,
                (device.vid, device.pid),
            ) as cursor:
                rows = await cursor.fetchall()
        return [_row_to_profile(row) for row in rows]

    async def get_profile(self, profile_id: str) -> Profile | None:
        conn = await self._db.connection()
        with translate_errors("get_profile"):
            async with conn.execute(f"SELECT {PROFILE_COLUMNS} FROM profiles WHERE id=?", (profile_id,)) as cursor:
                row = await cursor.fetchone()
        return _row_to_profile(row) if row else None

    async def save_profile(self, profile: Profile) -> Profile:
        """Insert or overwrite a profile by id.

        ``created_at`` is taken from the existing row when there is one and
        from the clock otherwise; whatever the caller passes is ignored.
        ``updated_at`` is stamped on every save.
        """
        config_json = encode_config(profile.config)

        async with self._db.key_lock(_lock_key(profile.id)):
            conn = await self._db.connection()
            with translate_errors("save_profile"):
                async with conn.execute("SELECT created_at FROM profiles WHERE id=?", (profile.id,)) as cursor:
                    existing = await cursor.fetchone()

                now = self._clock()
                created_at = int(existing["created_at"]) if existing else now
                await conn.execute(
                    f"""
                    INSERT INTO profiles({PROFILE_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                      name=excluded.name,
                      keyboard_vid=excluded.keyboard_vid,
                      keyboard_pid=excluded.keyboard_pid,
                      config_json=excluded.config_json,
                      created_at=excluded.created_at,
                      updated_at=excluded.updated_at
                    """,
                    (
                        profile.id,
                        profile.name,
                        profile.device.vid,
                        profile.device.pid,
                        config_json,
                        created_at,
                        now,
                    ),
                )

        logger.debug("Profile %s %s for %s", profile.id, "updated" if existing else "created", profile.device)
        return profile.model_copy(update={"created_at": created_at, "updated_at": now})

    async def delete_profile(self, profile_id: str) -> bool:
        """Delete a profile. Returns False when no row had that id; never raises for a missing id."""
        async with self._db.key_lock(_lock_key(profile_id)):
            conn = await self._db.connection()
            with translate_errors("delete_profile"):
                cursor = await conn.execute("DELETE FROM profiles WHERE id=?", (profile_id,))
                deleted = cursor.rowcount > 0
                await cursor.close()

        logger.debug("Profile %s %s", profile_id, "deleted" if deleted else "already absent")
        return deleted
