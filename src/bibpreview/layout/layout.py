"""
Compiled layouts.

A Layout is a tree of nodes produced by LayoutHelper. Rendering is a pure
function of (entry, database, highlight pattern) plus the current value of
the entry-number counter.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TYPE_CHECKING

from bibpreview.layout.entry_number import EntryNumberCounter, ENTRY_NUMBER
from bibpreview.layout.formatters import LayoutFormatter

if TYPE_CHECKING:
    from bibpreview.model import BibEntry, BibDatabase

# --- Special field names ---
ENTRY_TYPE_FIELD = "bibtextype"
ENTRY_NUMBER_FIELD = "entrynumber"

DEFAULT_HIGHLIGHT_COLOR = "#ffff00"

# Markup tags and character entities are never highlighted
_MARKUP = re.compile(r"(<[^>]*>|&#?[A-Za-z0-9]+;)")


@dataclass
class TextNode:
    """Literal layout text, emitted as is."""
    text: str


@dataclass
class FieldNode:
    """Reference to a field, optionally passed through formatters."""
    name: str
    formatters: List[LayoutFormatter] = field(default_factory=list)
    # False when the field sits inside a markup tag, e.g. an href attribute
    highlight: bool = True


@dataclass
class GroupNode:
    """\\begin{name} ... \\end{name}: rendered only if the field is non-empty."""
    name: str
    children: list = field(default_factory=list)


class Layout:
    """
    Compiled layout, ready to render entries.

    Usage:
        layout = LayoutHelper("\\author: \\title").get_layout_from_text()
        text = layout.do_layout(entry, database, highlight_pattern)
    """

    def __init__(self, nodes: Sequence, entry_number: Optional[EntryNumberCounter] = None,
                 highlight_color: str = DEFAULT_HIGHLIGHT_COLOR):
        self._nodes = list(nodes)
        self._entry_number = entry_number or ENTRY_NUMBER
        self._highlight_color = highlight_color

    @property
    def nodes(self) -> list:
        return list(self._nodes)

    def do_layout(self, entry: 'BibEntry', database: Optional['BibDatabase'] = None,
                  highlight_pattern: Optional[re.Pattern] = None) -> str:
        """Render an entry. Missing fields render as empty strings."""
        return "".join(self._render_nodes(self._nodes, entry, database, highlight_pattern))

    # Alias matching the renderer's collaborator contract
    render = do_layout

    def _render_nodes(self, nodes, entry, database, highlight_pattern):
        for node in nodes:
            if isinstance(node, TextNode):
                yield node.text
            elif isinstance(node, FieldNode):
                yield self._render_field(node, entry, database, highlight_pattern)
            elif isinstance(node, GroupNode):
                if self._field_value(node.name, entry, database):
                    yield from self._render_nodes(node.children, entry, database, highlight_pattern)
            else:
                raise TypeError(f"Unknown layout node: {type(node).__name__}")

    def _render_field(self, node: FieldNode, entry, database, highlight_pattern) -> str:
        value = self._field_value(node.name, entry, database)
        for formatter in node.formatters:
            value = formatter(value)
        if highlight_pattern is not None and node.highlight and value:
            value = self._highlight(value, highlight_pattern)
        return value

    def _field_value(self, name: str, entry, database) -> str:
        if name == ENTRY_TYPE_FIELD:
            return entry.entry_type or ""
        if name == ENTRY_NUMBER_FIELD:
            return str(self._entry_number.value)

        value = entry.get_field(name)
        if value is None:
            return ""
        if database is not None:
            value = database.resolve_for_strings(value)
        return value

    def _highlight(self, value: str, pattern: re.Pattern) -> str:
        def mark(match: re.Match) -> str:
            if not match.group(0):
                return match.group(0)
            return f'<span style="background-color:{self._highlight_color};">{match.group(0)}</span>'
        parts = _MARKUP.split(value)
        # Odd indices are the captured tags and entities
        return "".join(part if i % 2 else pattern.sub(mark, part) for i, part in enumerate(parts))
