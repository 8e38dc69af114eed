import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from app_config import (
    AppConfigurationError,
    config_summary,
    load_app_config,
    resolve_config_path,
)
from audio import (
    AudioError,
    ChimeConfig,
    ChimePlayer,
    SoundDeviceAudioOutput,
)
from pomodoro import PomodoroConfig, TimerEngine
from runtime import (
    ConsoleCommandSource,
    ConsoleRenderer,
    RuntimeBootstrap,
    RuntimeEngine,
)
from storage import FocusRecordStore, JsonSessionStore, StorageError


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )
    return logging.getLogger("focus_timer")


def setup_file_logging(log_file: str, level: str) -> Optional[logging.Handler]:
    """Apply the configured level, writing records to `log_file` when set.

    With a log file the console handlers stay at WARNING so INFO records do
    not break the status line. Without one the console takes the level.
    """
    root = logging.getLogger()
    numeric_level = logging.getLevelName(level)
    if not log_file:
        root.setLevel(numeric_level)
        return None

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    for existing in root.handlers:
        existing.setLevel(max(existing.level, logging.WARNING))
    root.addHandler(handler)
    root.setLevel(min(numeric_level, logging.WARNING))
    return handler


def setup_signal_handlers(runtime: RuntimeEngine) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        logging.getLogger("focus_timer").info("%s received, stopping...", signal_name)
        runtime.request_stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def main() -> int:
    """Run the focus timer console host."""
    logger = setup_logging(level=logging.WARNING)

    # Load typed app configuration.
    try:
        app_config = load_app_config()
    except AppConfigurationError as error:
        logger.error(f"App configuration error: {error}")
        return 1

    try:
        setup_file_logging(app_config.storage.log_file, app_config.runtime.log_level)
    except OSError as error:
        logger.warning("Log file unavailable, logging to console only: %s", error)
    logger.info("Loaded runtime config: %s", resolve_config_path())
    logger.debug("Effective settings: %s", config_summary(app_config))

    timer_settings = app_config.timer
    try:
        pomodoro_config = PomodoroConfig(
            focus_seconds=timer_settings.focus_seconds,
            short_break_seconds=timer_settings.short_break_seconds,
            long_break_seconds=timer_settings.long_break_seconds,
            cycles_before_long_break=timer_settings.cycles_before_long_break,
        )
    except ValueError as error:
        logger.error(f"Timer configuration error: {error}")
        return 1

    # Storage collaborators.
    try:
        record_store = FocusRecordStore(
            app_config.storage.database_file,
            logger=logging.getLogger("storage.focus_records"),
        )
    except StorageError as error:
        logger.error(f"Storage initialization error: {error}")
        return 1
    session_store = JsonSessionStore(
        app_config.storage.session_file,
        logger=logging.getLogger("storage.session"),
    )

    engine = TimerEngine(pomodoro_config, logger=logging.getLogger("pomodoro"))
    try:
        snapshot = session_store.load()
    except StorageError as error:
        logger.warning("Ignoring unreadable session: %s", error)
        snapshot = None
    if snapshot is not None:
        engine.restore(snapshot)

    # Optional chime.
    chime: Optional[ChimePlayer] = None
    if app_config.sound.enabled:
        try:
            chime_config = ChimeConfig.from_settings(app_config.sound)
            chime = ChimePlayer(
                config=chime_config,
                output=SoundDeviceAudioOutput(
                    output_device_index=chime_config.output_device_index,
                    logger=logging.getLogger("audio.output"),
                ),
                logger=logging.getLogger("audio.chime"),
            )
        except AudioError as error:
            logger.warning("Chime disabled due to init error: %s", error)

    runtime = RuntimeEngine(
        RuntimeBootstrap(
            logger=logger,
            app_config=app_config,
            engine=engine,
            commands=ConsoleCommandSource(),
            renderer=ConsoleRenderer(),
            record_store=record_store,
            session_store=session_store,
            chime=chime,
        )
    )
    setup_signal_handlers(runtime)
    return runtime.run()


if __name__ == "__main__":
    sys.exit(main())
