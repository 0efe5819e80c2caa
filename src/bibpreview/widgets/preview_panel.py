"""
Entry Preview Panel

Embeddable, printable preview of a single bibliographic entry. Re-renders
whenever the shown entry changes, and highlights search matches when used
as a search highlight listener.
"""

import logging
import re
from typing import Optional

from PyQt6.QtCore import Qt, QUrl, QPoint, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QTextBrowser, QMenu, QFrame

from bibpreview.core import BackgroundTaskPool, DisplayThreadExecutor, QtDisplayThread
from bibpreview.exceptions import ExternalViewerError
from bibpreview.layout import Layout
from bibpreview.model import BibDatabaseContext, BibEntry
from bibpreview.preview import LivePreviewRenderer
from bibpreview.protocols import (
    ExternalViewer, PrintService, get_external_viewer, get_preview_config, get_print_service,
)
from bibpreview.theming import PreviewColorScheme
from bibpreview.widgets.qt_adapters import (
    DesktopExternalViewer, MessageBoxNotificationSink, QtPrintService, TextBrowserSink,
)

logger = logging.getLogger(__name__)

URL_FIELD = "url"


class PreviewPanel(QWidget):
    """
    Displays a BibEntry using a layout.

    Usage:
        panel = PreviewPanel(database_context=context, layout_format=layout)
        panel.close_requested.connect(host.hide_bottom_component)
        panel.set_entry(entry)

    Args:
        database_context: (may be None) Used to resolve strings and open links
        entry: (may be None) Entry shown right away
        layout_format: Layout string; defaults to PreviewConfig.default_layout
    """

    close_requested = pyqtSignal()

    def __init__(self, database_context: Optional[BibDatabaseContext] = None,
                 entry: Optional[BibEntry] = None, layout_format: Optional[str] = None,
                 parent=None, color_scheme: Optional[PreviewColorScheme] = None,
                 print_service: Optional[PrintService] = None,
                 external_viewer: Optional[ExternalViewer] = None,
                 display_thread: Optional[DisplayThreadExecutor] = None):
        super().__init__(parent)

        config = get_preview_config()
        self.color_scheme = color_scheme or config.color_scheme
        self._external_viewer = external_viewer
        self._background = BackgroundTaskPool()
        self._extra_context_actions = []

        self._setup_ui(config.content_margin)
        self._setup_actions(config.key_bindings)

        self.sink = TextBrowserSink(self.preview_pane)
        self.renderer = LivePreviewRenderer(
            self.sink,
            layout_format if layout_format is not None else config.default_layout,
            database_context=database_context,
            display_thread=display_thread or QtDisplayThread(),
            background=self._background,
            print_service=print_service or get_print_service() or QtPrintService(),
            notification_sink=MessageBoxNotificationSink(self),
        )
        if entry is not None:
            self.set_entry(entry)

    def _setup_ui(self, margin: int):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.preview_pane = QTextBrowser(self)
        self.preview_pane.setReadOnly(True)
        self.preview_pane.setOpenLinks(False)
        self.preview_pane.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.preview_pane.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.preview_pane.document().setDocumentMargin(margin)
        self.preview_pane.setFrameShape(QFrame.Shape.NoFrame)
        self.preview_pane.setStyleSheet(f"""
            QTextBrowser {{
                background-color: {self.color_scheme.to_hex(self.color_scheme.panel_bg)};
                color: {self.color_scheme.to_hex(self.color_scheme.text_primary)};
                border: 1px solid {self.color_scheme.to_hex(self.color_scheme.border_color)};
            }}
        """)
        self.preview_pane.document().setDefaultStyleSheet(
            f"a {{ color: {self.color_scheme.to_hex(self.color_scheme.link_color)}; }}"
        )
        self.preview_pane.anchorClicked.connect(self._on_anchor_clicked)

        self.preview_pane.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.preview_pane.customContextMenuRequested.connect(self._show_context_menu)

        layout.addWidget(self.preview_pane)

    def _setup_actions(self, key_bindings: dict):
        self.print_action = QAction("Print entry preview", self)
        self.print_action.setToolTip("Print entry preview")
        self.print_action.triggered.connect(self.print_preview)

        self.copy_action = QAction("Copy preview", self)
        self.copy_action.setToolTip("Copy preview")
        self.copy_action.triggered.connect(self.copy_preview)

        self.close_action = QAction("Close window", self)
        self.close_action.setToolTip("Close window")
        self.close_action.triggered.connect(self.close_requested)

        # Shortcuts work while the panel's window has focus
        for action, binding in ((self.copy_action, "copy_preview"), (self.close_action, "close_dialog")):
            sequence = key_bindings.get(binding)
            if sequence:
                action.setShortcut(QKeySequence(sequence))
                action.setShortcutContext(Qt.ShortcutContext.WindowShortcut)
            self.addAction(action)

    def add_context_action(self, action: QAction):
        """Append a host action (e.g. switching preview styles) to the context menu."""
        self._extra_context_actions.append(action)

    def _build_context_menu(self) -> QMenu:
        menu = QMenu(self)
        menu.addAction(self.print_action)
        menu.addAction(self.copy_action)
        for action in self._extra_context_actions:
            menu.addAction(action)
        return menu

    def _show_context_menu(self, pos: QPoint):
        self._build_context_menu().exec(self.preview_pane.mapToGlobal(pos))

    def _on_anchor_clicked(self, url: QUrl):
        database_context = self.renderer.database_context
        if database_context is None:
            return

        viewer = self._external_viewer or get_external_viewer() or DesktopExternalViewer()
        try:
            viewer.open_external_viewer(database_context, url.toString(), URL_FIELD)
        except ExternalViewerError:
            logger.warning("Could not open external viewer", exc_info=True)

    # ========== PREVIEW API ==========

    def set_database_context(self, database_context: Optional[BibDatabaseContext]):
        self.renderer.set_database_context(database_context)

    def update_layout(self, layout_format: str):
        self.renderer.update_layout(layout_format)

    def set_layout(self, layout: Optional[Layout]):
        self.renderer.set_layout(layout)

    def set_entry(self, entry: Optional[BibEntry]):
        self.renderer.set_entry(entry)

    def get_entry(self) -> Optional[BibEntry]:
        return self.renderer.get_entry()

    def highlight_pattern(self, pattern: Optional[re.Pattern]):
        """Search highlight listener hook."""
        self.renderer.set_highlight_pattern(pattern)

    def refresh(self):
        self.renderer.refresh()

    def print_preview(self):
        self.renderer.export_as_print_job()

    def copy_preview(self):
        self.renderer.export_to_clipboard()

    def closeEvent(self, event):
        self.renderer.close()
        self._background.cleanup()
        super().closeEvent(event)
