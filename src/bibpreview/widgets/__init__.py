"""
Preview widgets.

The embeddable PreviewPanel and the Qt-backed sink, printing,
notification and link-opening adapters it uses.
"""

from .qt_adapters import (
    TextBrowserSink,
    QtPrintService,
    MessageBoxNotificationSink,
    DesktopExternalViewer,
)
from .preview_panel import PreviewPanel

__all__ = [
    "TextBrowserSink",
    "QtPrintService",
    "MessageBoxNotificationSink",
    "DesktopExternalViewer",
    "PreviewPanel",
]
