"""Error taxonomy for the configuration store."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for all store failures."""


class StorageUnavailableError(StoreError):
    """The backing database could not be opened or failed an operation."""


class CorruptDataError(StoreError):
    """A stored configuration document could not be decoded."""

    def __init__(self, table: str, key: object, reason: str) -> None:
        super().__init__(f"Corrupt config_json in {table} for {key!r}: {reason}")
        self.table = table
        self.key = key
        self.reason = reason


class ConstraintViolationError(StoreError):
    """A write violated a key or integrity constraint."""
