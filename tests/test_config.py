from __future__ import annotations

from pathlib import Path

import pytest

from timeblocks.config import (
    DEFAULT_BLOCK_TYPE_ENV,
    LOG_LEVEL_ENV,
    SNAPSHOT_PATH_ENV,
    load_settings,
    validate_setting,
)
from timeblocks.models import TimeBlockType


def _clear_env(monkeypatch) -> None:
    for name in (SNAPSHOT_PATH_ENV, DEFAULT_BLOCK_TYPE_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path, monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.snapshot_path == (tmp_path / ".data" / "timeblocks.json").resolve()
    assert settings.default_block_type == TimeBlockType.CUSTOM
    assert settings.log_level == "WARNING"


def test_env_overrides(tmp_path, monkeypatch) -> None:
    _clear_env(monkeypatch)
    snapshot_path = tmp_path / "blocks.json"
    monkeypatch.setenv(SNAPSHOT_PATH_ENV, str(snapshot_path))
    monkeypatch.setenv(DEFAULT_BLOCK_TYPE_ENV, "focus")
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

    settings = load_settings()

    assert settings.snapshot_path == snapshot_path
    assert settings.default_block_type == TimeBlockType.FOCUS
    assert settings.log_level == "DEBUG"


def test_relative_snapshot_path_resolves_against_cwd(tmp_path, monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(SNAPSHOT_PATH_ENV, "state/blocks.json")

    assert load_settings().snapshot_path == Path(tmp_path / "state" / "blocks.json").resolve()


@pytest.mark.parametrize(
    ("key", "value", "message"),
    [
        ("colour", "red", "Unknown setting key"),
        ("snapshot_path", "  ", "must not be empty"),
        ("default_block_type", "NAP", "must be one of"),
        ("log_level", "TRACE", "must be one of"),
    ],
)
def test_validate_setting_rejects_bad_values(key: str, value: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        validate_setting(key, value)


def test_invalid_env_value_fails_loading(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv(LOG_LEVEL_ENV, "loud")

    with pytest.raises(ValueError, match="log_level"):
        load_settings()
