"""Serializable subset of timer state persisted across restarts."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from .constants import Phase, Status


class SessionFormatError(Exception):
    """Raised when a persisted session payload cannot be decoded."""


@dataclass(frozen=True)
class SessionSnapshot:
    """Phase, status, countdown, and cycle count as stored by the host."""
    phase: Phase = Phase.FOCUS
    status: Status = Status.IDLE
    remaining_seconds: int = 0
    total_seconds: int = 0
    completed_focus_cycles: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "status": self.status.value,
            "remaining_seconds": self.remaining_seconds,
            "total_seconds": self.total_seconds,
            "completed_focus_cycles": self.completed_focus_cycles,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SessionSnapshot":
        if not isinstance(raw, Mapping):
            raise SessionFormatError("Session payload must be an object.")
        return cls(
            phase=_as_enum(Phase, raw.get("phase"), "phase"),
            status=_as_enum(Status, raw.get("status"), "status"),
            remaining_seconds=_as_count(raw.get("remaining_seconds", 0), "remaining_seconds"),
            total_seconds=_as_count(raw.get("total_seconds", 0), "total_seconds"),
            completed_focus_cycles=_as_count(
                raw.get("completed_focus_cycles", 0),
                "completed_focus_cycles",
            ),
        )

    def restored(self) -> "SessionSnapshot":
        """Return a copy safe to load into an engine.

        A running session is downgraded to paused so nothing resumes
        unattended, and counters are clamped to the engine invariants.
        """
        status = Status.PAUSED if self.status == Status.RUNNING else self.status
        total = max(0, self.total_seconds)
        remaining = min(max(0, self.remaining_seconds), total)
        if status == Status.IDLE or total == 0 or remaining == 0:
            status = Status.IDLE
            total = 0
            remaining = 0
        return replace(
            self,
            status=status,
            remaining_seconds=remaining,
            total_seconds=total,
            completed_focus_cycles=max(0, self.completed_focus_cycles),
        )


def _as_enum(enum_type, value: Any, field: str):
    try:
        return enum_type(value)
    except ValueError as error:
        allowed = ", ".join(member.value for member in enum_type)
        raise SessionFormatError(f"{field} must be one of: {allowed}.") from error


def _as_count(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SessionFormatError(f"{field} must be an integer.")
    return value
