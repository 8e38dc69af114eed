"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from app_config_schema import (
    DEFAULT_DATA_DIR_NAME,
    DEFAULT_DATABASE_FILE,
    DEFAULT_LOG_FILE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SESSION_FILE,
    LOG_LEVELS,
    AppConfig,
    AppConfigurationError,
    RuntimeSettings,
    SoundSettings,
    StorageSettings,
    TimerSettings,
)


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
    default_data_root: Optional[Path] = None,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    timer = _parse_timer_settings(_section(raw, "timer"))
    storage = _parse_storage_settings(
        _section(raw, "storage"),
        base_dir=base_dir,
        default_data_root=default_data_root,
    )
    sound = _parse_sound_settings(_section(raw, "sound"))
    runtime = _parse_runtime_settings(_section(raw, "runtime"))

    return AppConfig(
        timer=timer,
        storage=storage,
        sound=sound,
        runtime=runtime,
        source_file=source_file,
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerSettings:
    return TimerSettings(
        focus_seconds=_as_positive_int(
            section.get("focus_seconds", 25 * 60),
            "timer.focus_seconds",
        ),
        short_break_seconds=_as_positive_int(
            section.get("short_break_seconds", 5 * 60),
            "timer.short_break_seconds",
        ),
        long_break_seconds=_as_positive_int(
            section.get("long_break_seconds", 15 * 60),
            "timer.long_break_seconds",
        ),
        cycles_before_long_break=_as_positive_int(
            section.get("cycles_before_long_break", 4),
            "timer.cycles_before_long_break",
        ),
    )


def _parse_storage_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
    default_data_root: Optional[Path],
) -> StorageSettings:
    raw_data_dir = _as_str(section.get("data_dir", ""), "storage.data_dir")
    if raw_data_dir:
        data_dir = Path(_resolve_path(base_dir, raw_data_dir))
    else:
        root = default_data_root if default_data_root is not None else _default_data_root()
        data_dir = root / DEFAULT_DATA_DIR_NAME

    database_file = _as_str(
        section.get("database_file", DEFAULT_DATABASE_FILE),
        "storage.database_file",
    ) or DEFAULT_DATABASE_FILE
    session_file = _as_str(
        section.get("session_file", DEFAULT_SESSION_FILE),
        "storage.session_file",
    ) or DEFAULT_SESSION_FILE
    # An empty log_file keeps logging on the console only.
    log_file = _as_str(section.get("log_file", DEFAULT_LOG_FILE), "storage.log_file")

    return StorageSettings(
        data_dir=str(data_dir),
        database_file=_resolve_path(data_dir, database_file),
        session_file=_resolve_path(data_dir, session_file),
        log_file=_resolve_path(data_dir, log_file),
    )


def _parse_sound_settings(section: Mapping[str, Any]) -> SoundSettings:
    volume = _as_float(section.get("volume", 0.3), "sound.volume")
    if not 0.0 <= volume <= 1.0:
        raise AppConfigurationError("sound.volume must be in [0, 1].")
    duration = _as_float(section.get("duration_seconds", 0.6), "sound.duration_seconds")
    if duration <= 0:
        raise AppConfigurationError("sound.duration_seconds must be greater than zero.")
    return SoundSettings(
        enabled=_as_bool(section.get("enabled", True), "sound.enabled"),
        output_device=(
            _as_int(section.get("output_device"), "sound.output_device")
            if "output_device" in section
            else None
        ),
        volume=volume,
        duration_seconds=duration,
    )


def _parse_runtime_settings(section: Mapping[str, Any]) -> RuntimeSettings:
    frame_interval = _as_float(
        section.get("frame_interval_seconds", 0.2),
        "runtime.frame_interval_seconds",
    )
    if frame_interval <= 0:
        raise AppConfigurationError(
            "runtime.frame_interval_seconds must be greater than zero."
        )
    history_limit = _as_int(section.get("history_limit", 10), "runtime.history_limit")
    if history_limit < 0:
        raise AppConfigurationError("runtime.history_limit must not be negative.")
    log_level = (
        _as_str(section.get("log_level", DEFAULT_LOG_LEVEL), "runtime.log_level").upper()
        or DEFAULT_LOG_LEVEL
    )
    if log_level not in LOG_LEVELS:
        raise AppConfigurationError(
            f"runtime.log_level must be one of: {', '.join(LOG_LEVELS)}."
        )
    return RuntimeSettings(
        frame_interval_seconds=frame_interval,
        history_limit=history_limit,
        default_task=(
            _as_str(section.get("default_task", "Focus"), "runtime.default_task")
            or "Focus"
        ),
        log_level=log_level,
    )


def _default_data_root() -> Path:
    return Path.home() / ".local" / "share"


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_positive_int(value: Any, field: str) -> int:
    number = _as_int(value, field)
    if number <= 0:
        raise AppConfigurationError(f"{field} must be greater than zero.")
    return number


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
