"""pytest configuration and fixtures for bibpreview tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from bibpreview.core import InlineDisplayThread
from bibpreview.layout import EntryNumberCounter
from bibpreview.model import BibEntry
from bibpreview.protocols import set_preview_config, register_print_service, register_external_viewer


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_globals():
    """Keep global registrations from leaking between tests."""
    yield
    set_preview_config(None)
    register_print_service(None)
    register_external_viewer(None)


class RecordingSink:
    """DisplaySink that records calls and owns a fake clipboard."""

    def __init__(self):
        self.text = ""
        self.calls = []
        self.selected = False
        self.clipboard = None

    def set_text(self, text):
        self.calls.append("set_text")
        self.text = text

    def scroll_to_origin(self):
        self.calls.append("scroll_to_origin")

    def select_all(self):
        self.calls.append("select_all")
        self.selected = True

    def copy_selection_to_clipboard(self):
        self.calls.append("copy")
        if self.selected:
            self.clipboard = self.text

    def clear_selection(self):
        self.calls.append("clear_selection")
        self.selected = False


class FakePrintService:
    def __init__(self, error=None):
        self.jobs = []
        self._error = error

    def submit(self, content, job_label):
        if self._error is not None:
            raise self._error
        self.jobs.append((content, job_label))


class FakeNotifier:
    def __init__(self):
        self.errors = []

    def show_error(self, title, message):
        self.errors.append((title, message))


class InlineBackground:
    """Runs background jobs immediately, remembering that it did."""

    def __init__(self):
        self.jobs = 0

    def __call__(self, job):
        self.jobs += 1
        job()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def print_service():
    return FakePrintService()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def background():
    return InlineBackground()


@pytest.fixture
def counter():
    return EntryNumberCounter()


@pytest.fixture
def entry():
    return BibEntry("article", cite_key="knuth1984", fields={
        "author": "Donald E. Knuth",
        "title": "Literate Programming",
        "journal": "#cj#",
        "year": "1984",
    })


@pytest.fixture
def make_renderer(sink, print_service, notifier, background, counter):
    """Factory for renderers wired to inline collaborators."""
    from bibpreview.preview import LivePreviewRenderer

    def factory(layout_format="\\title", **kwargs):
        options = dict(
            display_thread=InlineDisplayThread(),
            background=background,
            print_service=print_service,
            notification_sink=notifier,
            entry_number=counter,
        )
        options.update(kwargs)
        return LivePreviewRenderer(sink, layout_format, **options)

    return factory


@pytest.fixture
def failing_print_service():
    """Print service whose every job fails with a PrinterError."""
    from bibpreview.exceptions import PrinterError
    return FakePrintService(error=PrinterError("paper jam"))


@pytest.fixture
def spare_print_service():
    return FakePrintService()
