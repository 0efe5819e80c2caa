"""Base configuration for the entry preview.

Provides hooks for applications to customize preview behavior.
"""

from typing import Dict, Optional
from dataclasses import dataclass, field

from bibpreview.theming import PreviewColorScheme

DEFAULT_LAYOUT = (
    "<font face=\"sans-serif\">"
    "<b><i>\\bibtextype</i><a name=\"\\bibtexkey\">\\begin{bibtexkey} (\\bibtexkey)\\end{bibtexkey}</a></b><br>__NEWLINE__"
    "\\begin{author} \\format[HTMLChars]{\\author}<BR>\\end{author}__NEWLINE__"
    "\\begin{title} \\format[HTMLChars]{\\title} \\end{title}<BR>__NEWLINE__"
    "\\begin{journal} <em>\\format[HTMLChars]{\\journal}, </em>\\end{journal}__NEWLINE__"
    "\\begin{booktitle} <em>\\format[HTMLChars]{\\booktitle}, </em>\\end{booktitle}__NEWLINE__"
    "\\begin{year}<b>\\year</b>\\end{year}__NEWLINE__"
    "\\begin{url}<BR>URL: <a href=\"\\url\">\\url</a>\\end{url}__NEWLINE__"
    "</font>"
)


@dataclass
class PreviewConfig:
    """Configuration for preview behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        default_layout: Layout used when a panel is created without one
        no_entry_label: Print job label when no entry (or no cite key) is shown
        key_bindings: Key sequence per action name ("copy_preview", "close_dialog")
        content_margin: Margin around the rendered text, in pixels
        log_level: Level applied to the "bibpreview" logger by configure_logging()
        color_scheme: Colors for the preview surface and highlighting
    """

    default_layout: str = DEFAULT_LAYOUT
    no_entry_label: str = "NO ENTRY"
    key_bindings: Dict[str, str] = field(default_factory=lambda: {
        "copy_preview": "Ctrl+Shift+C",
        "close_dialog": "Esc",
    })
    content_margin: int = 3
    log_level: Optional[str] = None
    color_scheme: PreviewColorScheme = field(default_factory=PreviewColorScheme)


# Global config instance (set by application)
_preview_config: Optional[PreviewConfig] = None


def set_preview_config(config: Optional[PreviewConfig]) -> None:
    """Set the global preview configuration (None restores the defaults).

    Args:
        config: PreviewConfig instance
    """
    global _preview_config
    _preview_config = config


def get_preview_config() -> PreviewConfig:
    """Get the current preview configuration.

    Returns:
        Current PreviewConfig or default if not set
    """
    if _preview_config is None:
        return PreviewConfig()
    return _preview_config
