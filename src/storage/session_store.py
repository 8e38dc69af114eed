"""JSON file persistence for the timer session snapshot."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pomodoro import SessionFormatError, SessionSnapshot

from .errors import StorageError


class JsonSessionStore:
    """Loads and atomically saves a `SessionSnapshot` as a JSON object."""

    def __init__(self, path: str, *, logger: Optional[logging.Logger] = None):
        self._path = Path(path)
        self._logger = logger or logging.getLogger("storage.session")

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[SessionSnapshot]:
        if not self._path.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as error:
            raise StorageError(f"Failed to read session file {self._path}: {error}") from error
        try:
            return SessionSnapshot.from_dict(raw)
        except SessionFormatError as error:
            raise StorageError(f"Invalid session file {self._path}: {error}") from error

    def save(self, snapshot: SessionSnapshot) -> None:
        payload = json.dumps(snapshot.to_dict(), indent=2, sort_keys=True)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=str(self._path.parent),
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(temp_name, self._path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as error:
            raise StorageError(f"Failed to write session file {self._path}: {error}") from error
        self._logger.debug("Session saved: %s", self._path)
