"""Runtime orchestration loop: console commands, engine ticks, and rendering."""

from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from app_config import AppConfig
from audio import ChimePlayer
from pomodoro import TimerEngine
from storage import FocusRecordStore, JsonSessionStore, StorageError

from .command_dispatch import CommandDispatcher
from .commands import parse_command
from .messages import HELP_TEXT, status_line
from .ticks import TickDependencies, TickProcessor


class CommandSourceLike(Protocol):
    def poll(self) -> list[str]:
        ...


class RendererLike(Protocol):
    def render(self, line: str) -> None:
        ...

    def announce(self, text: str) -> None:
        ...


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    engine: TimerEngine
    commands: CommandSourceLike
    renderer: RendererLike
    record_store: Optional[FocusRecordStore] = None
    session_store: Optional[JsonSessionStore] = None
    chime: Optional[ChimePlayer] = None
    now_fn: Callable[[], dt.datetime] = field(default=_utc_now)
    sleep_fn: Callable[[float], None] = field(default=time.sleep)


class RuntimeEngine:
    """Single-threaded frame loop that owns the timer engine for the process."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._engine = bootstrap.engine
        self._renderer = bootstrap.renderer
        self._stop_requested = False

        runtime_settings = bootstrap.app_config.runtime
        self._frame_interval = runtime_settings.frame_interval_seconds
        self._dispatcher = CommandDispatcher(
            engine=self._engine,
            record_store=bootstrap.record_store,
            logger=self._logger,
            history_limit=runtime_settings.history_limit,
            default_task=runtime_settings.default_task,
            now_fn=bootstrap.now_fn,
        )
        self._tick_processor = TickProcessor(
            TickDependencies(
                engine=self._engine,
                record_store=bootstrap.record_store,
                chime=bootstrap.chime,
                logger=self._logger,
                announce=self._renderer.announce,
                save_session=self.save_session,
                current_task=lambda: self._dispatcher.task,
            )
        )

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    def request_stop(self) -> None:
        self._stop_requested = True

    def run(self) -> int:
        self._renderer.announce(HELP_TEXT)
        try:
            while not self._stop_requested:
                self.run_frame()
                if self._stop_requested:
                    break
                self._bootstrap.sleep_fn(self._frame_interval)
        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self._shutdown()
        return 0

    def run_frame(self) -> None:
        self._tick_processor.process(self._bootstrap.now_fn())
        for line in self._bootstrap.commands.poll():
            self._handle_line(line)
            if self._stop_requested:
                return
        self._renderer.render(status_line(self._engine, self._dispatcher.task))

    def save_session(self) -> None:
        session_store = self._bootstrap.session_store
        if session_store is None:
            return
        try:
            session_store.save(self._engine.session_snapshot())
        except StorageError as error:
            self._logger.error("Failed to save session: %s", error)

    def _handle_line(self, line: str) -> None:
        command = parse_command(line)
        if command is None:
            return
        result = self._dispatcher.handle(command)
        if result.state_changed:
            self.save_session()
        if result.message:
            self._renderer.announce(result.message)
        if result.quit_requested:
            self.request_stop()

    def _shutdown(self) -> None:
        self._logger.info("Saving session...")
        self.save_session()

        record_store = self._bootstrap.record_store
        if record_store is not None:
            record_store.close()
