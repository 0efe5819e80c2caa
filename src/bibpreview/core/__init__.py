"""
Core Qt utilities.

Thread marshaling onto the display thread, background tasks and logging
helpers. No preview-specific logic.
"""

from .display_thread import DisplayThreadExecutor, QtDisplayThread, InlineDisplayThread
from .background_task import BackgroundTask, BackgroundTaskPool
from .log_utils import configure_logging

__all__ = [
    "DisplayThreadExecutor",
    "QtDisplayThread",
    "InlineDisplayThread",
    "BackgroundTask",
    "BackgroundTaskPool",
    "configure_logging",
]
