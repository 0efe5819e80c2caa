"""Background tasks for blocking work (printing) that must stay off the GUI thread."""

import logging
from typing import Callable, Any, List, Optional, Tuple
from PyQt6.QtCore import QThread, pyqtSignal

logger = logging.getLogger(__name__)

# --- Module-level constants ---
CLEANUP_WAIT_MS = 200     # Wait time per task during widget close cleanup


class BackgroundTask(QThread):
    """
    Runs a callable on its own QThread.

    Usage:
        task = BackgroundTask(target=my_func, args=(a, b))
        task.result_ready.connect(on_success)
        task.error_occurred.connect(on_error)  # Receives Exception, not str
        task.start()
    """

    result_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(Exception)  # Full exception, caller decides

    def __init__(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: dict = None,
        parent=None
    ):
        super().__init__(parent)
        self._target = target
        self._args = args
        self._kwargs = kwargs or {}

    def run(self):
        """Execute target in background."""
        try:
            result = self._target(*self._args, **self._kwargs)
            self.result_ready.emit(result)
        except Exception as e:
            logger.exception(f"Background task {self._target!r} failed")
            self.error_occurred.emit(e)


class BackgroundTaskPool:
    """
    Starts independent background tasks and keeps them alive until they finish.

    Unlike a single-slot task runner, a new task never cancels earlier ones:
    every submitted print job runs to completion.

    Usage in widget:
        self._background = BackgroundTaskPool()
        self._background(lambda: printer.submit(html, "knuth1984"))

        def closeEvent(self, event):
            self._background.cleanup()
            super().closeEvent(event)
    """

    def __init__(self):
        self._tasks: List[BackgroundTask] = []

    def __call__(self, job: Callable[[], Any]) -> BackgroundTask:
        return self.run(job)

    def run(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: dict = None,
        on_success: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> BackgroundTask:
        """
        Start target on a new BackgroundTask.

        Args:
            target: Function to execute in background
            args: Positional arguments for target
            kwargs: Keyword arguments for target
            on_success: Callback for successful result (GUI thread)
            on_error: Callback for error (GUI thread, receives Exception)

        Returns:
            The started BackgroundTask
        """
        task = BackgroundTask(target=target, args=args, kwargs=kwargs)
        if on_success:
            task.result_ready.connect(on_success)
        if on_error:
            task.error_occurred.connect(on_error)
        task.finished.connect(lambda: self._forget(task))

        self._tasks.append(task)
        task.start()
        return task

    @property
    def running_count(self) -> int:
        return sum(1 for task in self._tasks if task.isRunning())

    def _forget(self, task: BackgroundTask) -> None:
        if task in self._tasks:
            self._tasks.remove(task)

    def cleanup(self):
        """Wait briefly for running tasks. Call from closeEvent."""
        for task in list(self._tasks):
            if task.isRunning():
                task.wait(CLEANUP_WAIT_MS)
        self._tasks = [task for task in self._tasks if task.isRunning()]
