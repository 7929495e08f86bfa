from __future__ import annotations

import asyncio
import math

import pytest

from rkconfig.store import DeviceIdentity


@pytest.mark.asyncio
async def test_load_config_absent_for_unknown_device(configs, selection, device) -> None:
    assert await configs.load_config(device) is None
    assert await configs.get_row(device) is None
    assert await selection.get_selected_profile(device) is None


@pytest.mark.asyncio
async def test_save_config_creates_row_without_selection(configs, clock, device) -> None:
    row = await configs.save_config(device, {"brightness": 5})

    assert row.selected_profile_id is None
    assert row.updated_at == clock.now

    stored = await configs.get_row(device)
    assert stored is not None
    assert stored.config == {"brightness": 5}
    assert stored.selected_profile_id is None


@pytest.mark.asyncio
async def test_last_config_write_wins(configs, clock, device) -> None:
    await configs.save_config(device, {"brightness": 1, "layers": [[1, 2], [3]]})
    clock.advance(10)
    await configs.save_config(device, {"brightness": 2})

    assert await configs.load_config(device) == {"brightness": 2}
    row = await configs.get_row(device)
    assert row.updated_at == clock.now


@pytest.mark.asyncio
async def test_config_save_preserves_selection(configs, selection, device) -> None:
    await selection.set_selected_profile(device, "profile-1")
    await configs.save_config(device, {"brightness": 3})

    assert await selection.get_selected_profile(device) == "profile-1"
    assert await configs.load_config(device) == {"brightness": 3}


@pytest.mark.asyncio
async def test_devices_are_isolated(configs) -> None:
    a = DeviceIdentity(vid=0x258A, pid=0x0049)
    b = DeviceIdentity(vid=0x258A, pid=0x004A)

    await configs.save_config(a, {"mode": "a"})
    await configs.save_config(b, {"mode": "b"})

    assert await configs.load_config(a) == {"mode": "a"}
    assert await configs.load_config(b) == {"mode": "b"}


@pytest.mark.asyncio
async def test_unserializable_config_is_rejected_before_write(configs, device) -> None:
    with pytest.raises(TypeError):
        await configs.save_config(device, {"handle": object()})
    with pytest.raises(ValueError):
        await configs.save_config(device, {"gain": math.nan})

    assert await configs.load_config(device) is None


@pytest.mark.asyncio
async def test_none_config_is_rejected(configs, device) -> None:
    with pytest.raises(ValueError, match="must not be None"):
        await configs.save_config(device, None)

    assert await configs.get_row(device) is None


@pytest.mark.asyncio
async def test_concurrent_config_saves_never_drop_selection(configs, selection, device) -> None:
    await configs.save_config(device, {"n": -1})

    writes = [configs.save_config(device, {"n": i}) for i in range(25)]
    writes.insert(12, selection.set_selected_profile(device, "abc"))
    await asyncio.gather(*writes)

    assert await selection.get_selected_profile(device) == "abc"
    assert (await configs.load_config(device))["n"] in range(25)
