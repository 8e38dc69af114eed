"""Phase, status, and default duration constants used by the focus timer."""

from __future__ import annotations

from enum import Enum

DEFAULT_FOCUS_SECONDS = 25 * 60
DEFAULT_SHORT_BREAK_SECONDS = 5 * 60
DEFAULT_LONG_BREAK_SECONDS = 15 * 60
DEFAULT_CYCLES_BEFORE_LONG_BREAK = 4

DEFAULT_TASK_LABEL = "Focus"
MAX_TASK_LABEL_LENGTH = 60


class Phase(str, Enum):
    """Purpose of the current countdown."""
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class Status(str, Enum):
    """Whether the countdown is idle, consuming time, or frozen."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


PHASE_LABELS: dict[Phase, str] = {
    Phase.FOCUS: "Focus",
    Phase.SHORT_BREAK: "Short break",
    Phase.LONG_BREAK: "Long break",
}
