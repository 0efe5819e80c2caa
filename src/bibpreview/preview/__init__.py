"""
Live entry preview.

The renderer that keeps a display sink in sync with one observed entry.
"""

from .live_preview_renderer import LivePreviewRenderer, LayoutCompiler

__all__ = [
    "LivePreviewRenderer",
    "LayoutCompiler",
]
