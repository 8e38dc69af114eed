"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_DATA_DIR_NAME = "focus-timer"
DEFAULT_DATABASE_FILE = "focus_timer.db"
DEFAULT_SESSION_FILE = "session.json"
DEFAULT_LOG_FILE = "focus_timer.log"
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerSettings:
    """Phase durations and long-break cadence from `[timer]`."""
    focus_seconds: int = 25 * 60
    short_break_seconds: int = 5 * 60
    long_break_seconds: int = 15 * 60
    cycles_before_long_break: int = 4


@dataclass(frozen=True)
class StorageSettings:
    """Resolved locations of the focus-record database, session file and log."""
    data_dir: str = ""
    database_file: str = ""
    session_file: str = ""
    log_file: str = ""


@dataclass(frozen=True)
class SoundSettings:
    """Phase-finished chime settings from `[sound]`."""
    enabled: bool = True
    output_device: Optional[int] = None
    volume: float = 0.3
    duration_seconds: float = 0.6


@dataclass(frozen=True)
class RuntimeSettings:
    """Host loop cadence and console defaults from `[runtime]`."""
    frame_interval_seconds: float = 0.2
    history_limit: int = 10
    default_task: str = "Focus"
    log_level: str = DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    timer: TimerSettings
    storage: StorageSettings
    sound: SoundSettings
    runtime: RuntimeSettings
    source_file: str
