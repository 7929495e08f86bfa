"""SQLite-backed storage for keyboard configs, profiles and selection."""

from rkconfig.store.db import Database
from rkconfig.store.device_configs import DeviceConfigStore
from rkconfig.store.errors import (
    ConstraintViolationError,
    CorruptDataError,
    StorageUnavailableError,
    StoreError,
)
from rkconfig.store.profiles import ProfileStore
from rkconfig.store.schemas import DeviceConfigRow, DeviceIdentity, Profile
from rkconfig.store.selection import SelectionManager

__all__ = [
    "ConstraintViolationError",
    "CorruptDataError",
    "Database",
    "DeviceConfigRow",
    "DeviceConfigStore",
    "DeviceIdentity",
    "Profile",
    "ProfileStore",
    "SelectionManager",
    "StorageUnavailableError",
    "StoreError",
]
