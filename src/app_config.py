from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    RuntimeSettings,
    SoundSettings,
    StorageSettings,
    TimerSettings,
)

CONFIG_FILE_ENV = "APP_CONFIG_FILE"

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "RuntimeSettings",
    "SoundSettings",
    "StorageSettings",
    "TimerSettings",
    "config_summary",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv(CONFIG_FILE_ENV)
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if path.exists():
        return path

    # Frozen builds look next to the executable when nothing explicit was given.
    if config_path is None and env_path is None and getattr(sys, "frozen", False):
        executable_path = Path(sys.executable).resolve().parent / DEFAULT_CONFIG_FILE
        if executable_path.exists():
            return executable_path

    return path


def load_app_config(
    config_path: str | None = None,
    *,
    default_data_root: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> AppConfig:
    """Load `config.toml`; a missing default file falls back to built-in settings."""
    log = logger or logging.getLogger("app_config")
    explicit = config_path is not None or os.getenv(CONFIG_FILE_ENV) is not None
    path = resolve_config_path(config_path)

    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        log.info("No config file at %s; using defaults.", path)
        return parse_app_config(
            {},
            base_dir=path.parent,
            source_file="",
            default_data_root=default_data_root,
        )
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(
        raw,
        base_dir=path.parent,
        source_file=str(path),
        default_data_root=default_data_root,
    )


def config_summary(app_config: AppConfig) -> dict[str, Any]:
    """Flat view of the effective settings for startup logging."""
    timer = app_config.timer
    return {
        "source_file": app_config.source_file or "<defaults>",
        "focus_seconds": timer.focus_seconds,
        "short_break_seconds": timer.short_break_seconds,
        "long_break_seconds": timer.long_break_seconds,
        "cycles_before_long_break": timer.cycles_before_long_break,
        "database_file": app_config.storage.database_file,
        "session_file": app_config.storage.session_file,
        "log_file": app_config.storage.log_file or "<console>",
        "log_level": app_config.runtime.log_level,
        "sound_enabled": app_config.sound.enabled,
    }
