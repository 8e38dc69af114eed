"""Console command vocabulary and parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pomodoro import Phase
from pomodoro.constants import DEFAULT_TASK_LABEL, MAX_TASK_LABEL_LENGTH

COMMAND_START = "start"
COMMAND_PAUSE = "pause"
COMMAND_STOP = "stop"
COMMAND_SET_PHASE = "set_phase"
COMMAND_RESET = "reset"
COMMAND_TASK = "task"
COMMAND_HISTORY = "history"
COMMAND_STATUS = "status"
COMMAND_HELP = "help"
COMMAND_QUIT = "quit"
COMMAND_UNKNOWN = "unknown"

COMMAND_ALIASES: dict[str, str] = {
    "start": COMMAND_START,
    "s": COMMAND_START,
    "pause": COMMAND_PAUSE,
    "resume": COMMAND_PAUSE,
    "p": COMMAND_PAUSE,
    "stop": COMMAND_STOP,
    "x": COMMAND_STOP,
    "reset": COMMAND_RESET,
    "r": COMMAND_RESET,
    "task": COMMAND_TASK,
    "t": COMMAND_TASK,
    "history": COMMAND_HISTORY,
    "h": COMMAND_HISTORY,
    "status": COMMAND_STATUS,
    "help": COMMAND_HELP,
    "?": COMMAND_HELP,
    "quit": COMMAND_QUIT,
    "exit": COMMAND_QUIT,
    "q": COMMAND_QUIT,
}

PHASE_ALIASES: dict[str, Phase] = {
    "focus": Phase.FOCUS,
    "f": Phase.FOCUS,
    "short": Phase.SHORT_BREAK,
    "b": Phase.SHORT_BREAK,
    "long": Phase.LONG_BREAK,
    "l": Phase.LONG_BREAK,
}


@dataclass(frozen=True)
class ConsoleCommand:
    """A parsed console line."""
    name: str
    argument: str = ""
    phase: Optional[Phase] = None
    raw: str = ""


def parse_command(line: str) -> Optional[ConsoleCommand]:
    """Parse one input line; blank lines yield None."""
    text = line.strip()
    if not text:
        return None

    head, _, rest = text.partition(" ")
    keyword = head.lower()
    argument = rest.strip()

    phase = PHASE_ALIASES.get(keyword)
    if phase is not None:
        return ConsoleCommand(name=COMMAND_SET_PHASE, phase=phase, raw=text)

    name = COMMAND_ALIASES.get(keyword)
    if name is None:
        return ConsoleCommand(name=COMMAND_UNKNOWN, argument=text, raw=text)
    return ConsoleCommand(name=name, argument=argument, raw=text)


def sanitize_task_label(label: str) -> str:
    compact = " ".join(label.split())
    compact = compact.strip()[:MAX_TASK_LABEL_LENGTH]
    return compact or DEFAULT_TASK_LABEL
