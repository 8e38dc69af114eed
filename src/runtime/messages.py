"""Status and response text builders for the console host."""

from __future__ import annotations

import datetime as dt
from typing import Iterable

from pomodoro import PHASE_LABELS, Phase, Status, TimerEngine
from storage import FocusRecord

PROGRESS_BAR_WIDTH = 20
CYCLE_DONE = "●"
CYCLE_PENDING = "○"

HELP_TEXT = "\n".join(
    [
        "Commands:",
        "  start | s          start the current phase, or pause/resume it",
        "  pause | p          pause or resume",
        "  stop | x           stop the countdown",
        "  focus | short | long   pick the next phase (while stopped)",
        "  reset | r          clear completed cycles and return to focus",
        "  task <label>       label for recorded focus time",
        "  history | h        recent focus records",
        "  status             print the current state",
        "  quit | q           save and exit",
    ]
)


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def format_total(seconds: int) -> str:
    hours, remainder = divmod(max(0, int(seconds)), 3600)
    return f"{hours}h {remainder // 60:02d}m"


def phase_label(phase: Phase) -> str:
    return PHASE_LABELS[phase]


def progress_bar(fraction: float, width: int = PROGRESS_BAR_WIDTH) -> str:
    filled = int(round(max(0.0, min(1.0, fraction)) * width))
    return "#" * filled + "-" * (width - filled)


def cycle_dots(done: int, total: int) -> str:
    done = max(0, min(done, total))
    return CYCLE_DONE * done + CYCLE_PENDING * (total - done)


def status_line(engine: TimerEngine, task: str) -> str:
    """One-line rendering of the timer for the console."""
    if engine.status == Status.IDLE:
        clock = format_duration(engine.config.duration_for(engine.phase))
    else:
        clock = engine.remaining_display()
    return (
        f"[{phase_label(engine.phase)}] {clock} "
        f"[{progress_bar(engine.progress())}] {engine.status.value:<7} "
        f"{cycle_dots(engine.completed_focus_cycles, engine.config.cycles_before_long_break)} "
        f"task: {task}"
    )


def completion_message(finished: Phase, next_phase: Phase, duration_seconds: int | None) -> str:
    text = f"{phase_label(finished)} finished"
    if duration_seconds is not None:
        text += f" ({format_duration(duration_seconds)} recorded)"
    return f"{text}. Next: {phase_label(next_phase)}. Type 'start' to begin."


def history_lines(
    records: Iterable[FocusRecord],
    *,
    total_today_seconds: int,
) -> list[str]:
    lines = [f"Focus today: {format_total(total_today_seconds)}"]
    records = list(records)
    if not records:
        lines.append("No focus records yet.")
        return lines
    for record in records:
        completed = record.completed_at.astimezone().strftime("%Y-%m-%d %H:%M")
        lines.append(
            f"  {completed}  {format_duration(record.duration_seconds)}  "
            f"#{record.completed_focus_cycles}  {record.task}"
        )
    return lines


def start_of_local_day(now: dt.datetime) -> dt.datetime:
    local = now.astimezone()
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(dt.timezone.utc)
