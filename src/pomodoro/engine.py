"""Frame-driven focus/break state machine with caller-supplied wall-clock time."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Optional

from .constants import (
    DEFAULT_CYCLES_BEFORE_LONG_BREAK,
    DEFAULT_FOCUS_SECONDS,
    DEFAULT_LONG_BREAK_SECONDS,
    DEFAULT_SHORT_BREAK_SECONDS,
    Phase,
    Status,
)
from .session import SessionSnapshot


@dataclass(frozen=True)
class PomodoroConfig:
    """Phase durations in seconds and the number of focus cycles per long break."""
    focus_seconds: int = DEFAULT_FOCUS_SECONDS
    short_break_seconds: int = DEFAULT_SHORT_BREAK_SECONDS
    long_break_seconds: int = DEFAULT_LONG_BREAK_SECONDS
    cycles_before_long_break: int = DEFAULT_CYCLES_BEFORE_LONG_BREAK

    def __post_init__(self) -> None:
        for name in ("focus_seconds", "short_break_seconds", "long_break_seconds"):
            if int(getattr(self, name)) <= 0:
                raise ValueError(f"{name} must be greater than zero")
        if int(self.cycles_before_long_break) < 1:
            raise ValueError("cycles_before_long_break must be at least 1")

    def duration_for(self, phase: Phase) -> int:
        if phase == Phase.FOCUS:
            return int(self.focus_seconds)
        if phase == Phase.SHORT_BREAK:
            return int(self.short_break_seconds)
        return int(self.long_break_seconds)


@dataclass
class EngineState:
    """Mutable timer record owned by a single `TimerEngine`."""
    phase: Phase = Phase.FOCUS
    status: Status = Status.IDLE
    remaining_seconds: int = 0
    total_seconds: int = 0
    completed_focus_cycles: int = 0
    last_tick_time: Optional[dt.datetime] = None
    pending_finished_phase: Optional[Phase] = None
    pending_completed_focus_duration: Optional[int] = None


class TimerEngine:
    """Pomodoro phase state machine driven by `tick(now)` from the host loop.

    The engine never reads the clock. Completions are exposed through two
    read-and-clear fields which the host drains once per frame; a second
    completion before the drain overwrites the first.
    """

    def __init__(
        self,
        config: Optional[PomodoroConfig] = None,
        *,
        state: Optional[EngineState] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config or PomodoroConfig()
        self._state = state or EngineState()
        self._logger = logger or logging.getLogger("pomodoro")

    @property
    def config(self) -> PomodoroConfig:
        return self._config

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def status(self) -> Status:
        return self._state.status

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self._state.total_seconds

    @property
    def completed_focus_cycles(self) -> int:
        return self._state.completed_focus_cycles

    def start(self) -> None:
        state = self._state
        total = self._config.duration_for(state.phase)
        state.total_seconds = total
        state.remaining_seconds = total
        state.status = Status.RUNNING
        state.last_tick_time = None
        self._logger.info("Timer started: phase=%s duration=%ss", state.phase.value, total)

    def toggle_pause(self) -> None:
        state = self._state
        if state.status == Status.RUNNING:
            state.status = Status.PAUSED
            state.last_tick_time = None
            self._logger.info(
                "Timer paused: phase=%s remaining=%ss",
                state.phase.value,
                state.remaining_seconds,
            )
        elif state.status == Status.PAUSED:
            state.status = Status.RUNNING
            state.last_tick_time = None
            self._logger.info(
                "Timer resumed: phase=%s remaining=%ss",
                state.phase.value,
                state.remaining_seconds,
            )

    def stop(self) -> None:
        state = self._state
        state.status = Status.IDLE
        state.remaining_seconds = 0
        state.total_seconds = 0
        state.last_tick_time = None

    def set_phase(self, phase: Phase) -> None:
        self._state.phase = Phase(phase)
        self.stop()
        self._logger.info("Phase set manually: phase=%s", self._state.phase.value)

    def reset_pomodoros_and_stop(self) -> None:
        self._state.completed_focus_cycles = 0
        self._state.phase = Phase.FOCUS
        self.stop()
        self._logger.info("Session reset")

    def tick(self, now: dt.datetime) -> None:
        """Advance the countdown to `now`; fires at most one phase completion."""
        state = self._state
        if state.status != Status.RUNNING:
            return

        last = state.last_tick_time
        if last is None or now < last:
            # Baseline after start/resume, or re-baseline after the clock went back.
            state.last_tick_time = now
            return

        whole_seconds = int((now - last).total_seconds())
        if whole_seconds <= 0:
            return

        # Only whole seconds are consumed; the fraction stays in the baseline.
        state.last_tick_time = last + dt.timedelta(seconds=whole_seconds)
        state.remaining_seconds = max(0, state.remaining_seconds - whole_seconds)
        if state.remaining_seconds == 0:
            self._complete_phase()

    def _complete_phase(self) -> None:
        state = self._state
        finished = state.phase
        state.pending_finished_phase = finished

        if finished == Phase.FOCUS:
            state.pending_completed_focus_duration = state.total_seconds
            state.completed_focus_cycles += 1
            cycles = state.completed_focus_cycles
            if cycles > 0 and cycles % self._config.cycles_before_long_break == 0:
                state.phase = Phase.LONG_BREAK
                state.completed_focus_cycles = 0
            else:
                state.phase = Phase.SHORT_BREAK
        else:
            state.phase = Phase.FOCUS

        self.stop()
        self._logger.info(
            "Phase completed: finished=%s next=%s cycles=%d",
            finished.value,
            state.phase.value,
            state.completed_focus_cycles,
        )

    def take_finished_phase(self) -> Optional[Phase]:
        phase = self._state.pending_finished_phase
        self._state.pending_finished_phase = None
        return phase

    def take_last_completed_focus_duration(self) -> Optional[int]:
        duration = self._state.pending_completed_focus_duration
        self._state.pending_completed_focus_duration = None
        return duration

    def remaining_display(self) -> str:
        """Remaining time as `MM:SS`."""
        minutes, seconds = divmod(max(0, self._state.remaining_seconds), 60)
        return f"{minutes:02d}:{seconds:02d}"

    def progress(self) -> float:
        """Fraction of the current phase still remaining, 0.0 when idle."""
        total = self._state.total_seconds
        if total <= 0:
            return 0.0
        return max(0, self._state.remaining_seconds) / total

    def session_snapshot(self) -> SessionSnapshot:
        state = self._state
        return SessionSnapshot(
            phase=state.phase,
            status=state.status,
            remaining_seconds=state.remaining_seconds,
            total_seconds=state.total_seconds,
            completed_focus_cycles=state.completed_focus_cycles,
        )

    def restore(self, snapshot: SessionSnapshot) -> None:
        """Load persisted session fields; a running session comes back paused."""
        restored = snapshot.restored()
        state = self._state
        state.phase = restored.phase
        state.status = restored.status
        state.remaining_seconds = restored.remaining_seconds
        state.total_seconds = restored.total_seconds
        # A count saved under a larger cycles_before_long_break must still
        # reach the next long break.
        state.completed_focus_cycles = min(
            restored.completed_focus_cycles,
            self._config.cycles_before_long_break - 1,
        )
        state.last_tick_time = None
        state.pending_finished_phase = None
        state.pending_completed_focus_duration = None
        self._logger.info(
            "Session restored: phase=%s status=%s remaining=%ss cycles=%d",
            state.phase.value,
            state.status.value,
            state.remaining_seconds,
            state.completed_focus_cycles,
        )
