"""Qt implementations of the preview collaborator protocols."""

import logging
from typing import Any, Callable, Optional

from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QDesktopServices, QTextDocument
from PyQt6.QtPrintSupport import QPrinter
from PyQt6.QtWidgets import QMessageBox, QTextBrowser, QWidget

from bibpreview.exceptions import ExternalViewerError, PrinterError

logger = logging.getLogger(__name__)

DOI_RESOLVER = "https://doi.org/"


class TextBrowserSink:
    """DisplaySink writing rendered markup into a QTextBrowser."""

    def __init__(self, browser: QTextBrowser):
        self._browser = browser

    def set_text(self, text: str) -> None:
        self._browser.setHtml(text)

    def scroll_to_origin(self) -> None:
        self._browser.verticalScrollBar().setValue(0)
        self._browser.horizontalScrollBar().setValue(0)

    def select_all(self) -> None:
        self._browser.selectAll()

    def copy_selection_to_clipboard(self) -> None:
        self._browser.copy()

    def clear_selection(self) -> None:
        cursor = self._browser.textCursor()
        cursor.clearSelection()
        self._browser.setTextCursor(cursor)


class QtPrintService:
    """
    PrintService printing markup through QPrinter.

    Usage:
        service = QtPrintService()                               # default printer
        service = QtPrintService(output_file="/tmp/preview.pdf")  # PDF output
    """

    def __init__(self, output_file: Optional[str] = None,
                 printer_factory: Optional[Callable[[], QPrinter]] = None):
        self._output_file = output_file
        self._printer_factory = printer_factory or (lambda: QPrinter(QPrinter.PrinterMode.HighResolution))

    def submit(self, content: str, job_label: str) -> None:
        printer = self._printer_factory()
        printer.setDocName(job_label)
        if self._output_file:
            printer.setOutputFormat(QPrinter.OutputFormat.PdfFormat)
            printer.setOutputFileName(self._output_file)

        if not printer.isValid():
            raise PrinterError(f"No valid printer available for job '{job_label}'")

        document = QTextDocument()
        document.setHtml(content)
        try:
            document.print(printer)
        except RuntimeError as e:
            raise PrinterError(str(e)) from e
        logger.info(f"Sent preview '{job_label}' to {printer.printerName() or self._output_file}")


class MessageBoxNotificationSink:
    """NotificationSink showing a modal error box over a parent widget."""

    def __init__(self, parent: Optional[QWidget] = None):
        self._parent = parent

    def show_error(self, title: str, message: str) -> None:
        QMessageBox.critical(self._parent, title, message)


class DesktopExternalViewer:
    """ExternalViewer delegating to the desktop's URL handlers."""

    def open_external_viewer(self, database_context: Any, link: str, field_name: str) -> None:
        if field_name == "doi" and not link.startswith(("http://", "https://")):
            link = DOI_RESOLVER + link

        url = QUrl(link)
        if not url.isValid():
            raise ExternalViewerError(f"Invalid link: {link}")
        if not QDesktopServices.openUrl(url):
            raise ExternalViewerError(f"No application could open {link}")
