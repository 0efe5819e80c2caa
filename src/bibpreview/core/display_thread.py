"""Executors that run callables on the display (GUI) thread."""

import logging
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QThread, QCoreApplication, pyqtSignal, Qt

logger = logging.getLogger(__name__)


class DisplayThreadExecutor(Protocol):
    """Marshals work onto the thread that owns the display."""

    def is_display_thread(self) -> bool:
        ...

    def post(self, fn: Callable[[], None]) -> None:
        """Queue fn on the display thread and return immediately."""
        ...

    def run(self, fn: Callable[[], None]) -> None:
        """Run fn now if on the display thread, otherwise post it."""
        ...


class _Invoker(QObject):
    """Lives on the GUI thread; queued emissions run the callable there."""

    invoke = pyqtSignal(object)

    def __init__(self):
        super().__init__()
        self.invoke.connect(self._call, Qt.ConnectionType.QueuedConnection)

    def _call(self, fn):
        fn()


class QtDisplayThread:
    """
    Display thread backed by the QApplication event loop.

    Usage:
        display = QtDisplayThread()
        display.run(lambda: label.setText("done"))   # safe from any thread

    Must be created on the GUI thread (after QApplication exists) so the
    internal invoker is owned by that thread.
    """

    def __init__(self):
        app = QCoreApplication.instance()
        if app is None:
            raise RuntimeError("QtDisplayThread requires a QApplication instance")
        self._invoker = _Invoker()
        if self._invoker.thread() is not app.thread():
            self._invoker.moveToThread(app.thread())

    def is_display_thread(self) -> bool:
        app = QCoreApplication.instance()
        return app is not None and QThread.currentThread() is app.thread()

    def post(self, fn: Callable[[], None]) -> None:
        self._invoker.invoke.emit(fn)

    def run(self, fn: Callable[[], None]) -> None:
        if self.is_display_thread():
            fn()
        else:
            self.post(fn)


class InlineDisplayThread:
    """Treats the calling thread as the display thread. Used in tests and headless hosts."""

    def is_display_thread(self) -> bool:
        return True

    def post(self, fn: Callable[[], None]) -> None:
        fn()

    def run(self, fn: Callable[[], None]) -> None:
        fn()
