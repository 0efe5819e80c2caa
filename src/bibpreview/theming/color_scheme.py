"""
Color scheme for the entry preview.

Semantic colors for the preview surface and search highlighting, with a
light default (previews are usually printed) and a dark variant.
"""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class PreviewColorScheme:
    """
    Colors used by PreviewPanel and the search highlight markup.

    All colors are RGB tuples; use to_hex() for stylesheets and markup.
    """

    # Preview surface
    panel_bg: Tuple[int, int, int] = (255, 255, 255)       # #ffffff - Preview background
    border_color: Tuple[int, int, int] = (180, 180, 180)   # #b4b4b4 - Panel border
    text_primary: Tuple[int, int, int] = (0, 0, 0)         # #000000 - Rendered text
    link_color: Tuple[int, int, int] = (0, 100, 200)       # #0064c8 - Hyperlinks

    # Search highlighting
    highlight_bg: Tuple[int, int, int] = (255, 255, 0)     # #ffff00 - Matched text background

    def to_hex(self, color_tuple: Tuple[int, int, int]) -> str:
        """Convert an RGB tuple to a hex color string (e.g. "#ff0000")."""
        r, g, b = color_tuple[:3]
        return f"#{r:02x}{g:02x}{b:02x}"

    @classmethod
    def create_dark_theme(cls) -> 'PreviewColorScheme':
        """Dark preview surface with a muted highlight that keeps text readable."""
        return cls(
            panel_bg=(30, 30, 30),
            border_color=(85, 85, 85),
            text_primary=(255, 255, 255),
            link_color=(0, 170, 255),
            highlight_bg=(120, 110, 0),
        )

    @classmethod
    def load_from_file(cls, config_path: Optional[str] = None) -> 'PreviewColorScheme':
        """
        Load a color scheme from a JSON file of {name: [r, g, b]}.

        Falls back to the default scheme when the file is missing or invalid.
        """
        if config_path and Path(config_path).exists():
            try:
                with open(config_path, 'r') as f:
                    config = json.load(f)

                known = set(asdict(cls()).keys())
                scheme_kwargs = {
                    key: tuple(value) for key, value in config.items()
                    if key in known and isinstance(value, list) and len(value) >= 3
                }
                return cls(**scheme_kwargs)

            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load preview color scheme from {config_path}: {e}")

        return cls()
