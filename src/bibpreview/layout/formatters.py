"""Layout formatter registry.

Formatters are named value transforms applied by \\format[Name]{\\field}
in a layout. Applications can register their own.
"""

import html
import logging
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

# Takes a field value and returns the formatted value
LayoutFormatter = Callable[[str], str]


def _remove_brackets(value: str) -> str:
    return value.replace("{", "").replace("}", "")


class LayoutFormatterRegistry:
    """Registry of layout formatters by name.

    Example:
        from bibpreview.layout import LayoutFormatterRegistry

        LayoutFormatterRegistry.register("Initials", lambda v: v[:1] + ".")
    """

    _formatters: Dict[str, LayoutFormatter] = {
        "ToUpperCase": str.upper,
        "ToLowerCase": str.lower,
        "HTMLChars": html.escape,
        "RemoveBrackets": _remove_brackets,
    }

    @classmethod
    def register(cls, name: str, formatter: LayoutFormatter) -> None:
        """Register a formatter under a name used in \\format[...]."""
        if name in cls._formatters:
            logger.debug(f"Replacing layout formatter '{name}'")
        cls._formatters[name] = formatter

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._formatters.pop(name, None)

    @classmethod
    def get_formatter(cls, name: str) -> Optional[LayoutFormatter]:
        return cls._formatters.get(name)
