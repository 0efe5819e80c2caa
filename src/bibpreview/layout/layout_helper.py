"""
Layout compiler.

Turns layout text into a Layout tree. Supported syntax:
- \\field                       field value (case-insensitive name)
- \\begin{field} ... \\end{field}  body only when the field is non-empty
- \\format[F1,F2]{\\field}        field value passed through formatters
- \\\\                           literal backslash
Anything else is literal text.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from bibpreview.exceptions import LayoutCompileError
from bibpreview.layout.entry_number import EntryNumberCounter, ENTRY_NUMBER
from bibpreview.layout.formatters import LayoutFormatter, LayoutFormatterRegistry
from bibpreview.layout.layout import (
    Layout, TextNode, FieldNode, GroupNode, DEFAULT_HIGHLIGHT_COLOR,
)

logger = logging.getLogger(__name__)

# Stored layouts use this marker because they are kept on a single line
NEWLINE_MARKER = "__NEWLINE__"
NUMBER_FORMATTER = "Number"

_COMMAND = re.compile(r"[A-Za-z][A-Za-z0-9]*")
_BRACED = re.compile(r"\{([^{}]*)\}")
_BRACKETED = re.compile(r"\[([^\[\]]*)\]")
_FORMAT_ARGUMENT = re.compile(r"\{\s*\\([A-Za-z][A-Za-z0-9]*)\s*\}")


def _ends_inside_tag(chunk: str, in_tag: bool) -> bool:
    """Track whether text following chunk sits inside an HTML tag."""
    opened = chunk.rfind("<")
    closed = chunk.rfind(">")
    if opened < 0 and closed < 0:
        return in_tag
    return opened > closed


def prepare_layout_text(layout_format: str) -> str:
    """Replace the newline marker of a stored layout with real newlines."""
    return layout_format.replace(NEWLINE_MARKER, "\n")


class LayoutHelper:
    """
    Compiles one layout string.

    Usage:
        layout = LayoutHelper(prepare_layout_text(raw)).get_layout_from_text()

    Raises LayoutCompileError for unbalanced blocks, malformed commands and
    unknown formatters.
    """

    def __init__(self, text: str, formatters: Optional[Dict[str, LayoutFormatter]] = None,
                 entry_number: Optional[EntryNumberCounter] = None,
                 highlight_color: str = DEFAULT_HIGHLIGHT_COLOR):
        if text is None:
            raise LayoutCompileError("Layout text must not be None")
        self._text = text
        self._formatters = formatters
        self._entry_number = entry_number or ENTRY_NUMBER
        self._highlight_color = highlight_color

    def get_layout_from_text(self) -> Layout:
        nodes = self._parse()
        logger.debug(f"Compiled layout with {len(nodes)} top-level node(s)")
        return Layout(nodes, entry_number=self._entry_number, highlight_color=self._highlight_color)

    # ========== PARSING ==========

    def _parse(self) -> list:
        text = self._text
        root: list = []
        # Stack of (group name, children list) for open \begin blocks
        stack: List[Tuple[Optional[str], list]] = [(None, root)]
        literal: List[str] = []
        # True while the layout text so far has an unclosed '<'
        in_tag = False
        pos = 0

        def add_literal(chunk: str):
            nonlocal in_tag
            literal.append(chunk)
            in_tag = _ends_inside_tag(chunk, in_tag)

        def flush_literal():
            if literal:
                stack[-1][1].append(TextNode("".join(literal)))
                literal.clear()

        while pos < len(text):
            slash = text.find("\\", pos)
            if slash < 0:
                add_literal(text[pos:])
                break
            add_literal(text[pos:slash])
            pos = slash + 1

            if text.startswith("\\", pos):
                add_literal("\\")
                pos += 1
                continue

            command = _COMMAND.match(text, pos)
            if command is None:
                add_literal("\\")
                continue

            name = command.group(0)
            pos = command.end()
            lowered = name.lower()

            if lowered == "begin":
                group_name, pos = self._expect_braced(pos, "begin")
                flush_literal()
                group = GroupNode(group_name)
                stack[-1][1].append(group)
                stack.append((group_name, group.children))
            elif lowered == "end":
                group_name, pos = self._expect_braced(pos, "end")
                if len(stack) == 1:
                    raise LayoutCompileError(f"\\end{{{group_name}}} without matching \\begin")
                if stack[-1][0] != group_name:
                    raise LayoutCompileError(
                        f"\\end{{{group_name}}} does not close \\begin{{{stack[-1][0]}}}"
                    )
                flush_literal()
                stack.pop()
            elif lowered == "format":
                flush_literal()
                node, pos = self._parse_format(pos)
                node.highlight = not in_tag
                stack[-1][1].append(node)
            else:
                flush_literal()
                stack[-1][1].append(FieldNode(lowered, highlight=not in_tag))

        flush_literal()
        if len(stack) > 1:
            raise LayoutCompileError(f"\\begin{{{stack[-1][0]}}} is never closed")
        return root

    def _expect_braced(self, pos: int, command: str) -> Tuple[str, int]:
        match = _BRACED.match(self._text, pos)
        if match is None or not match.group(1).strip():
            raise LayoutCompileError(f"\\{command} must be followed by {{fieldname}} at position {pos}")
        return match.group(1).strip().lower(), match.end()

    def _parse_format(self, pos: int) -> Tuple[FieldNode, int]:
        names_match = _BRACKETED.match(self._text, pos)
        if names_match is None:
            raise LayoutCompileError(f"\\format must be followed by [formatters] at position {pos}")
        argument = _FORMAT_ARGUMENT.match(self._text, names_match.end())
        if argument is None:
            raise LayoutCompileError(f"\\format[...] must be followed by {{\\field}} at position {names_match.end()}")

        names = [n.strip() for n in names_match.group(1).split(",") if n.strip()]
        if not names:
            raise LayoutCompileError(f"\\format[] names no formatter at position {pos}")
        formatters = [self._resolve_formatter(n) for n in names]
        return FieldNode(argument.group(1).lower(), formatters), argument.end()

    def _resolve_formatter(self, name: str) -> LayoutFormatter:
        if name == NUMBER_FORMATTER:
            counter = self._entry_number
            return lambda _value: str(counter.value)

        if self._formatters is not None:
            formatter = self._formatters.get(name)
        else:
            formatter = LayoutFormatterRegistry.get_formatter(name)
        if formatter is None:
            raise LayoutCompileError(f"Unknown layout formatter '{name}'")
        return formatter
