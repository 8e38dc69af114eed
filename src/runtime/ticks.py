"""Per-frame tick handling: advance the engine and act on completions once."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from audio import AudioError, ChimePlayer
from pomodoro import Phase, TimerEngine
from storage import FocusRecordStore, StorageError

from .messages import completion_message


@dataclass(frozen=True)
class TickDependencies:
    """Collaborators notified when a phase completes."""
    engine: TimerEngine
    record_store: Optional[FocusRecordStore]
    chime: Optional[ChimePlayer]
    logger: logging.Logger
    announce: Callable[[str], None]
    save_session: Callable[[], None]
    current_task: Callable[[], str]


class TickProcessor:
    """Ticks the engine and drains its one-shot notifications every frame."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies

    def process(self, now: dt.datetime) -> Optional[Phase]:
        """Return the phase that finished during this frame, if any."""
        deps = self._dependencies
        engine = deps.engine
        engine.tick(now)

        finished = engine.take_finished_phase()
        focus_duration = engine.take_last_completed_focus_duration()
        if finished is None:
            return None

        if deps.chime is not None:
            try:
                deps.chime.play(finished)
            except AudioError as error:
                deps.logger.error("Chime playback failed: %s", error)

        if focus_duration is not None:
            self._record_focus(now, focus_duration)

        deps.save_session()
        deps.announce(completion_message(finished, engine.phase, focus_duration))
        return finished

    def _record_focus(self, now: dt.datetime, duration_seconds: int) -> None:
        deps = self._dependencies
        if deps.record_store is None:
            return
        engine = deps.engine
        # Entering a long break already reset the counter.
        if engine.phase == Phase.LONG_BREAK:
            cycles = engine.config.cycles_before_long_break
        else:
            cycles = engine.completed_focus_cycles
        try:
            deps.record_store.append(
                deps.current_task(),
                duration_seconds,
                now,
                cycles,
            )
        except StorageError as error:
            deps.logger.error("Failed to record focus phase: %s", error)
