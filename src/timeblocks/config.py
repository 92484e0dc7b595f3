from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from timeblocks.models import TimeBlockType

SNAPSHOT_PATH_ENV = "TIMEBLOCKS_SNAPSHOT_PATH"
DEFAULT_BLOCK_TYPE_ENV = "TIMEBLOCKS_DEFAULT_BLOCK_TYPE"
LOG_LEVEL_ENV = "TIMEBLOCKS_LOG_LEVEL"

DEFAULT_SETTINGS: dict[str, str] = {
    "snapshot_path": ".data/timeblocks.json",
    "default_block_type": TimeBlockType.CUSTOM.value,
    "log_level": "WARNING",
}
ALLOWED_SETTING_KEYS: set[str] = set(DEFAULT_SETTINGS)

_SETTING_ENV_VARS: dict[str, str] = {
    "snapshot_path": SNAPSHOT_PATH_ENV,
    "default_block_type": DEFAULT_BLOCK_TYPE_ENV,
    "log_level": LOG_LEVEL_ENV,
}
_LOG_LEVEL_VALUES: set[str] = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True)
class AppSettings:
    snapshot_path: Path
    default_block_type: TimeBlockType
    log_level: str


def validate_setting(key: str, value: str) -> None:
    if key not in ALLOWED_SETTING_KEYS:
        allowed = ", ".join(sorted(ALLOWED_SETTING_KEYS))
        raise ValueError(f"Unknown setting key: {key}. Allowed keys: {allowed}.")

    if key == "snapshot_path":
        if not value.strip():
            raise ValueError(f"Invalid value for {key}: must not be empty.")
        return

    if key == "default_block_type":
        allowed_types = {member.value for member in TimeBlockType}
        if value.strip().upper() not in allowed_types:
            allowed = ", ".join(sorted(allowed_types))
            raise ValueError(f"Invalid value for {key}: must be one of {allowed}.")
        return

    if key == "log_level":
        if value.strip().upper() not in _LOG_LEVEL_VALUES:
            allowed = ", ".join(sorted(_LOG_LEVEL_VALUES))
            raise ValueError(f"Invalid value for {key}: must be one of {allowed}.")
        return


def load_settings() -> AppSettings:
    raw_settings: dict[str, str] = {}
    for key, env_var in _SETTING_ENV_VARS.items():
        value = os.getenv(env_var)
        if value is None or value == "":
            value = DEFAULT_SETTINGS[key]
        validate_setting(key, value)
        raw_settings[key] = value.strip()

    return AppSettings(
        snapshot_path=_resolve_path(raw_settings["snapshot_path"]),
        default_block_type=TimeBlockType(raw_settings["default_block_type"].upper()),
        log_level=raw_settings["log_level"].upper(),
    )


def _resolve_path(value: str) -> Path:
    candidate = Path(value).expanduser()
    if candidate.is_absolute():
        return candidate
    return (Path.cwd() / candidate).resolve()
