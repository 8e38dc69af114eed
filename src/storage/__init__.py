"""Public exports for focus-record and session persistence."""

from .errors import StorageError
from .focus_records import FocusRecord, FocusRecordStore
from .session_store import JsonSessionStore

__all__ = [
    "FocusRecord",
    "FocusRecordStore",
    "JsonSessionStore",
    "StorageError",
]
