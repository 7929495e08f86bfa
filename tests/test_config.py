from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from rkconfig.config import AppSettings, load_settings


def test_missing_config_file_yields_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "missing.yaml")

    assert settings == AppSettings()
    assert settings.storage.db_path == "data/rk_configurator.db"
    assert settings.logging.json_output is True


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_settings(path) == AppSettings()


def test_yaml_overrides(tmp_path: Path) -> None:
    path = tmp_path / "custom.yaml"
    path.write_text(
        "storage:\n  db_path: /tmp/rk/custom.db\n  journal_mode: DELETE\nlogging:\n  json: false\n  level: debug\n",
        encoding="utf-8",
    )

    settings = load_settings(path)
    assert settings.storage.db_path == "/tmp/rk/custom.db"
    assert settings.storage.journal_mode == "DELETE"
    assert settings.storage.timeout_seconds == 5.0
    assert settings.logging.json_output is False
    assert settings.logging.level == "debug"


def test_invalid_values_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("storage:\n  journal_mode: FAST\n  timeout_seconds: 0\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_settings(path)


def test_bundled_default_config_is_valid() -> None:
    path = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"

    settings = load_settings(path)
    assert settings.storage.journal_mode == "WAL"
    assert settings.logging.service_name == "rk-configurator"
