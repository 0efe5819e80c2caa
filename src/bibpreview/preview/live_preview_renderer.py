"""
Live entry preview renderer.

Keeps a display sink in sync with the rendering of one observed entry:
entry replacement, field changes and highlight changes all funnel into
refresh(), which recomputes the whole text and publishes it on the display
thread. Refreshes may race; each one renders the then-current state, so the
last one to publish wins.
"""

import logging
import re
from typing import Any, Callable, Optional

from bibpreview.core import DisplayThreadExecutor, QtDisplayThread, BackgroundTaskPool
from bibpreview.exceptions import LayoutCompileError, PrinterError
from bibpreview.layout import (
    EntryNumberCounter, ENTRY_NUMBER, Layout, LayoutHelper, prepare_layout_text,
)
from bibpreview.model import BibDatabaseContext, BibEntry, FieldChangedEvent
from bibpreview.protocols import (
    DisplaySink, NotificationSink, PrintService, get_print_service, get_preview_config,
)

logger = logging.getLogger(__name__)

# Takes prepared layout text, returns a compiled layout or raises LayoutCompileError
LayoutCompiler = Callable[[str], Any]

PRINT_TITLE = "Print entry preview"
PRINT_FAILED_MESSAGE = "Could not print preview"


class LivePreviewRenderer:
    """
    Renders one BibEntry through a layout into a DisplaySink.

    Usage:
        renderer = LivePreviewRenderer(sink, layout_format=config.default_layout)
        renderer.set_database_context(context)
        renderer.set_entry(entry)            # subscribes and renders
        entry.set_field("year", "2021")      # re-renders via on_field_changed

    The renderer registers itself as the entry's listener; its identity is the
    subscription token.
    """

    def __init__(
        self,
        display_sink: DisplaySink,
        layout_format: str,
        database_context: Optional[BibDatabaseContext] = None,
        entry: Optional[BibEntry] = None,
        display_thread: Optional[DisplayThreadExecutor] = None,
        background: Optional[Callable[[Callable[[], None]], Any]] = None,
        print_service: Optional[PrintService] = None,
        notification_sink: Optional[NotificationSink] = None,
        entry_number: Optional[EntryNumberCounter] = None,
        layout_compiler: Optional[LayoutCompiler] = None,
    ):
        if layout_format is None:
            raise ValueError("layout_format must be given")

        self._sink = display_sink
        self._display_thread = display_thread or QtDisplayThread()
        self._background = background or BackgroundTaskPool()
        self._print_service = print_service
        self._notification_sink = notification_sink
        self._entry_number = entry_number or ENTRY_NUMBER
        self._compile = layout_compiler or self._compile_with_layout_helper

        self._database_context: Optional[BibDatabaseContext] = database_context
        self._entry: Optional[BibEntry] = None
        self._layout: Optional[Layout] = None
        self._layout_format: str = layout_format
        self._highlight_pattern: Optional[re.Pattern] = None
        self._rendered_output: str = ""

        self._recompile_layout()
        if entry is not None:
            self.set_entry(entry)

    # ========== STATE ==========

    @property
    def rendered_output(self) -> str:
        return self._rendered_output

    @property
    def layout(self) -> Optional[Layout]:
        return self._layout

    @property
    def layout_format(self) -> str:
        return self._layout_format

    @property
    def highlight_pattern(self) -> Optional[re.Pattern]:
        return self._highlight_pattern

    @property
    def database_context(self) -> Optional[BibDatabaseContext]:
        return self._database_context

    def get_entry(self) -> Optional[BibEntry]:
        return self._entry

    def set_database_context(self, database_context: Optional[BibDatabaseContext]) -> None:
        """Replace the resolving context. Takes effect on the next refresh."""
        self._database_context = database_context

    # ========== LAYOUT ==========

    def update_layout(self, layout_format: str) -> None:
        """Replace the layout string and recompile it."""
        self._layout_format = layout_format
        self._recompile_layout()

    def set_layout(self, layout: Optional[Layout]) -> None:
        """Install an already compiled layout."""
        self._layout = layout

    def _recompile_layout(self) -> None:
        try:
            self._layout = self._compile(prepare_layout_text(self._layout_format))
        except LayoutCompileError as e:
            self._layout = None
            logger.debug(f"No layout could be set: {e}", exc_info=True)

    def _compile_with_layout_helper(self, text: str) -> Layout:
        color_scheme = get_preview_config().color_scheme
        return LayoutHelper(
            text,
            entry_number=self._entry_number,
            highlight_color=color_scheme.to_hex(color_scheme.highlight_bg),
        ).get_layout_from_text()

    # ========== ENTRY SUBSCRIPTION ==========

    def set_entry(self, entry: Optional[BibEntry]) -> None:
        """Observe a new entry (or none) and re-render."""
        previous = self._entry
        if previous is not None and previous is not entry:
            previous.unregister_listener(self)
        self._entry = entry
        if entry is not None:
            entry.register_listener(self)

        # Recompiled on every entry switch, even when the layout string is unchanged
        self._recompile_layout()
        self.refresh()

    def on_field_changed(self, event: FieldChangedEvent) -> None:
        """Listener for field changes on the observed entry."""
        self.refresh()

    def set_highlight_pattern(self, pattern: Optional[re.Pattern]) -> None:
        self._highlight_pattern = pattern
        self.refresh()

    def close(self) -> None:
        """Stop observing the current entry."""
        if self._entry is not None:
            self._entry.unregister_listener(self)

    # ========== RENDERING ==========

    def refresh(self) -> None:
        """Re-render the current entry and publish it on the display thread."""
        # Layouts that print the entry number show 1 for a single previewed entry
        self._entry_number.reset()

        entry, layout = self._entry, self._layout
        if entry is not None and layout is not None:
            database = self._database_context.database if self._database_context is not None else None
            text = layout.render(entry, database, self._highlight_pattern)
        else:
            text = ""

        self._rendered_output = text
        self._display_thread.run(lambda: self._publish(text))

    def _publish(self, text: str) -> None:
        self._sink.set_text(text)
        self._sink.scroll_to_origin()

    # ========== EXPORT ==========

    def export_to_clipboard(self) -> None:
        """Copy the whole preview to the clipboard."""
        self._sink.select_all()
        self._sink.copy_selection_to_clipboard()
        self._sink.clear_selection()

    def export_as_print_job(self) -> None:
        """Print the current preview on a background thread."""
        service = self._print_service or get_print_service()
        if service is None:
            logger.warning("No print service registered, cannot print preview")
            return

        content = self._rendered_output
        cite_key = self._entry.get_cite_key() if self._entry is not None else None
        job_label = cite_key or get_preview_config().no_entry_label

        def print_job():
            try:
                service.submit(content, job_label)
            except PrinterError as e:
                logger.info(PRINT_FAILED_MESSAGE, exc_info=True)
                self._display_thread.run(lambda: self._notify_print_failure(e))

        self._background(print_job)

    def _notify_print_failure(self, error: PrinterError) -> None:
        if self._notification_sink is None:
            logger.warning(f"{PRINT_FAILED_MESSAGE} and no notification sink is set: {error}")
            return
        self._notification_sink.show_error(PRINT_TITLE, f"{PRINT_FAILED_MESSAGE}.\n{error}")
