"""Non-blocking console input and single-line status rendering."""

from __future__ import annotations

import os
import select
import sys
from typing import Optional, TextIO

from .commands import COMMAND_QUIT


class ConsoleCommandSource:
    """Reads complete lines from a stream without blocking the frame loop.

    Reads raw bytes from the stream's descriptor so nothing waits in Python's
    text buffer where `select` cannot see it. Needs a POSIX terminal or pipe.
    """
    def __init__(self, stream: Optional[TextIO] = None, read_size: int = 4096):
        self._stream = stream or sys.stdin
        self._read_size = read_size
        self._pending = b""
        self._closed = False

    def poll(self) -> list[str]:
        if self._closed:
            return []
        fd = self._stream.fileno()
        lines: list[str] = []
        while True:
            readable, _, _ = select.select([fd], [], [], 0)
            if not readable:
                return lines
            chunk = os.read(fd, self._read_size)
            if not chunk:
                # EOF ends the session like an explicit quit.
                self._closed = True
                if self._pending:
                    lines.append(_decode_line(self._pending))
                    self._pending = b""
                lines.append(COMMAND_QUIT)
                return lines
            *complete, self._pending = (self._pending + chunk).split(b"\n")
            lines.extend(_decode_line(raw) for raw in complete)


class ConsoleRenderer:
    """Keeps one status line redrawn in place and prints messages above it."""
    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream or sys.stdout
        self._last_line = ""

    def render(self, line: str) -> None:
        if line == self._last_line:
            return
        padding = " " * max(0, len(self._last_line) - len(line))
        self._stream.write(f"\r{line}{padding}")
        self._stream.flush()
        self._last_line = line

    def announce(self, text: str) -> None:
        if self._last_line:
            self._stream.write("\n")
        self._stream.write(f"{text}\n")
        self._stream.flush()
        self._last_line = ""


def _decode_line(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").rstrip("\r")
