"""
Core Qt utilities.

Timing, threading and cancellation helpers with no domain-specific logic.
"""

from .cancellation import CancellationToken
from .debounce_timer import DebounceTimer, DebouncedCommit
from .background_task import BackgroundTask, BackgroundTaskManager

__all__ = [
    "CancellationToken",
    "DebounceTimer",
    "DebouncedCommit",
    "BackgroundTask",
    "BackgroundTaskManager",
]
