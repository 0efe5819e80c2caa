"""
Theming for the preview panel.

Colors for the preview surface and search highlighting.
"""

from .color_scheme import PreviewColorScheme

__all__ = [
    "PreviewColorScheme",
]
