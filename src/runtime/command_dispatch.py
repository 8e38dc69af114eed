"""Dispatcher that applies parsed console commands to the timer engine."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from pomodoro import Status, TimerEngine
from storage import FocusRecordStore, StorageError

from .commands import (
    COMMAND_HELP,
    COMMAND_HISTORY,
    COMMAND_PAUSE,
    COMMAND_QUIT,
    COMMAND_RESET,
    COMMAND_SET_PHASE,
    COMMAND_START,
    COMMAND_STATUS,
    COMMAND_STOP,
    COMMAND_TASK,
    ConsoleCommand,
    sanitize_task_label,
)
from .messages import (
    HELP_TEXT,
    history_lines,
    phase_label,
    start_of_local_day,
    status_line,
)

@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one console command."""
    accepted: bool
    message: str = ""
    state_changed: bool = False
    quit_requested: bool = False


class CommandDispatcher:
    """Routes console commands to engine operations and host queries."""
    def __init__(
        self,
        *,
        engine: TimerEngine,
        record_store: Optional[FocusRecordStore],
        logger: logging.Logger,
        history_limit: int = 10,
        default_task: str = "Focus",
        now_fn: Callable[[], dt.datetime] = lambda: dt.datetime.now(dt.timezone.utc),
    ):
        self._engine = engine
        self._record_store = record_store
        self._logger = logger
        self._history_limit = history_limit
        self._now_fn = now_fn
        self._task = sanitize_task_label(default_task)

    @property
    def task(self) -> str:
        return self._task

    def handle(self, command: ConsoleCommand) -> DispatchResult:
        engine = self._engine
        name = command.name

        if name == COMMAND_START:
            if engine.status == Status.IDLE:
                engine.start()
                return self._changed(f"{phase_label(engine.phase)} started.")
            engine.toggle_pause()
            return self._changed(self._pause_message())

        if name == COMMAND_PAUSE:
            if engine.status == Status.IDLE:
                return DispatchResult(accepted=False, message="Timer is not running.")
            engine.toggle_pause()
            return self._changed(self._pause_message())

        if name == COMMAND_STOP:
            if engine.status == Status.IDLE:
                return DispatchResult(accepted=False, message="Timer is already stopped.")
            engine.stop()
            return self._changed("Timer stopped.")

        if name == COMMAND_SET_PHASE and command.phase is not None:
            if engine.status != Status.IDLE:
                return DispatchResult(
                    accepted=False,
                    message="Stop the timer before switching phase.",
                )
            engine.set_phase(command.phase)
            return self._changed(f"Phase set to {phase_label(command.phase)}.")

        if name == COMMAND_RESET:
            engine.reset_pomodoros_and_stop()
            return self._changed("Session reset.")

        if name == COMMAND_TASK:
            if not command.argument:
                return DispatchResult(accepted=True, message=f"Current task: {self._task}")
            self._task = sanitize_task_label(command.argument)
            self._logger.info("Task label set: %s", self._task)
            return DispatchResult(accepted=True, message=f"Task set to: {self._task}")

        if name == COMMAND_HISTORY:
            return self._history()

        if name == COMMAND_STATUS:
            return DispatchResult(accepted=True, message=status_line(engine, self._task))

        if name == COMMAND_HELP:
            return DispatchResult(accepted=True, message=HELP_TEXT)

        if name == COMMAND_QUIT:
            return DispatchResult(accepted=True, message="Bye.", quit_requested=True)

        self._logger.debug("Unknown console command: %s", command.raw)
        return DispatchResult(
            accepted=False,
            message=f"Unknown command: {command.raw}. Type 'help' for commands.",
        )

    def _changed(self, message: str) -> DispatchResult:
        return DispatchResult(accepted=True, message=message, state_changed=True)

    def _pause_message(self) -> str:
        if self._engine.status == Status.PAUSED:
            return f"Paused at {self._engine.remaining_display()}."
        return "Resumed."

    def _history(self) -> DispatchResult:
        if self._record_store is None:
            return DispatchResult(accepted=False, message="Focus history is unavailable.")
        try:
            records = self._record_store.recent(self._history_limit)
            total_today = self._record_store.total_focus_seconds(
                since=start_of_local_day(self._now_fn())
            )
        except StorageError as error:
            self._logger.error("Failed to load focus history: %s", error)
            return DispatchResult(accepted=False, message="Failed to load focus history.")
        return DispatchResult(
            accepted=True,
            message="\n".join(history_lines(records, total_today_seconds=total_today)),
        )
