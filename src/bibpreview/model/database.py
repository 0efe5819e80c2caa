"""Database of string constants used to resolve #name# references in field values."""

import logging
import re
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# --- Module-level constants ---
MAX_RESOLVE_DEPTH = 10    # Guards against strings that reference each other
_STRING_REFERENCE = re.compile(r"#([^#\s]+)#")


class BibDatabase:
    """
    Holds the @string constants of a bibliography.

    Usage:
        database = BibDatabase()
        database.add_string("acm", "Association for Computing Machinery")
        database.resolve_for_strings("#acm# Press")
        # → "Association for Computing Machinery Press"
    """

    def __init__(self, strings: Optional[Dict[str, str]] = None):
        self._strings: Dict[str, str] = {}
        for name, value in (strings or {}).items():
            self.add_string(name, value)

    def add_string(self, name: str, value: str) -> None:
        self._strings[name.lower()] = value

    def get_string(self, name: str) -> Optional[str]:
        return self._strings.get(name.lower())

    def resolve_for_strings(self, text: Optional[str]) -> Optional[str]:
        """
        Replace #name# references with their string values.

        Unknown names are left untouched. Values may reference other strings;
        resolution stops after MAX_RESOLVE_DEPTH passes.
        """
        if not text or "#" not in text:
            return text

        resolved = text
        for _ in range(MAX_RESOLVE_DEPTH):
            substituted = _STRING_REFERENCE.sub(self._substitute, resolved)
            if substituted == resolved:
                return substituted
            resolved = substituted

        logger.debug(f"Stopped resolving strings after {MAX_RESOLVE_DEPTH} passes: {text!r}")
        return resolved

    def _substitute(self, match: re.Match) -> str:
        value = self.get_string(match.group(1))
        return value if value is not None else match.group(0)


class BibDatabaseContext:
    """Scope handed to the preview; exposes the database used for string resolution."""

    def __init__(self, database: Optional[BibDatabase] = None):
        self.database = database if database is not None else BibDatabase()

    def get_database(self) -> BibDatabase:
        return self.database
