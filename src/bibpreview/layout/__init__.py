"""
Reference layout engine.

Compiles layout strings into Layout objects that render a BibEntry
to text or markup.
"""

from .entry_number import EntryNumberCounter, ENTRY_NUMBER
from .formatters import LayoutFormatter, LayoutFormatterRegistry
from .layout import Layout
from .layout_helper import LayoutHelper, NEWLINE_MARKER, prepare_layout_text

__all__ = [
    "EntryNumberCounter",
    "ENTRY_NUMBER",
    "LayoutFormatter",
    "LayoutFormatterRegistry",
    "Layout",
    "LayoutHelper",
    "NEWLINE_MARKER",
    "prepare_layout_text",
]
