"""Runtime engine exports."""

from .console import ConsoleCommandSource, ConsoleRenderer
from .loop import RuntimeBootstrap, RuntimeEngine

__all__ = [
    "ConsoleCommandSource",
    "ConsoleRenderer",
    "RuntimeBootstrap",
    "RuntimeEngine",
]
