"""Row models for device configurations and profiles."""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def epoch_now() -> int:
    """Current time as integer epoch seconds."""
    return int(time.time())


class DeviceIdentity(BaseModel):
    """USB vendor/product id pair identifying a class of keyboard."""

    model_config = ConfigDict(frozen=True)

    vid: int = Field(ge=0, le=0xFFFF)
    pid: int = Field(ge=0, le=0xFFFF)

    def __str__(self) -> str:
        return f"{self.vid:04x}:{self.pid:04x}"


class DeviceConfigRow(BaseModel):
    device: DeviceIdentity
    config: Any
    selected_profile_id: str | None = None
    updated_at: int


class Profile(BaseModel):
    """Named configuration snapshot scoped to one device."""

    id: str = Field(min_length=1)
    name: str
    device: DeviceIdentity
    config: Any
    created_at: int | None = None
    updated_at: int | None = None
