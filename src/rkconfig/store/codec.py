"""JSON encoding of opaque configuration documents."""

from __future__ import annotations

import json
from typing import Any

from rkconfig.store.errors import CorruptDataError


def encode_config(config: Any) -> str:
    """Serialize a config document; raises TypeError/ValueError if not JSON-encodable."""
    return json.dumps(config, separators=(",", ":"), allow_nan=False)


def decode_config(raw: str | bytes | None, table: str, key: object) -> Any:
    if raw is None:
        raise CorruptDataError(table, key, "config_json is NULL")
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CorruptDataError(table, key, str(exc)) from exc
