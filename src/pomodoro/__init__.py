from .constants import (
    DEFAULT_CYCLES_BEFORE_LONG_BREAK,
    DEFAULT_FOCUS_SECONDS,
    DEFAULT_LONG_BREAK_SECONDS,
    DEFAULT_SHORT_BREAK_SECONDS,
    PHASE_LABELS,
    Phase,
    Status,
)
from .engine import EngineState, PomodoroConfig, TimerEngine
from .session import SessionFormatError, SessionSnapshot

__all__ = [
    "DEFAULT_CYCLES_BEFORE_LONG_BREAK",
    "DEFAULT_FOCUS_SECONDS",
    "DEFAULT_LONG_BREAK_SECONDS",
    "DEFAULT_SHORT_BREAK_SECONDS",
    "PHASE_LABELS",
    "EngineState",
    "Phase",
    "PomodoroConfig",
    "SessionFormatError",
    "SessionSnapshot",
    "Status",
    "TimerEngine",
]
