"""
Bibliographic entry model.

A BibEntry holds named fields and a citation key and notifies registered
listeners whenever a field changes. Listeners are tracked by identity, so the
listener object itself is the subscription token.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

KEY_FIELD = "bibtexkey"


@dataclass(frozen=True)
class FieldChangedEvent:
    """Immutable event representing a field change on an entry."""
    entry: 'BibEntry'
    field_name: str                 # Lower-case field name
    old_value: Optional[str]        # None if the field was not set
    new_value: Optional[str]        # None if the field was cleared


class FieldChangeListener(Protocol):
    """Anything that wants to hear about field changes on an entry."""

    def on_field_changed(self, event: FieldChangedEvent) -> None:
        ...


class BibEntry:
    """
    A bibliographic record with case-insensitive field names.

    Usage:
        entry = BibEntry("article", cite_key="knuth1984")
        entry.set_field("title", "Literate Programming")
        entry.register_listener(preview)   # preview.on_field_changed(event)
    """

    def __init__(self, entry_type: str = "misc", cite_key: Optional[str] = None,
                 fields: Optional[Dict[str, str]] = None):
        self.entry_type = entry_type
        self._fields: Dict[str, str] = {}
        self._listeners: List[Any] = []
        self._listeners_lock = threading.Lock()

        for name, value in (fields or {}).items():
            self._fields[name.lower()] = value
        if cite_key is not None:
            self._fields[KEY_FIELD] = cite_key

    def __repr__(self) -> str:
        return f"BibEntry({self.entry_type!r}, cite_key={self.get_cite_key()!r})"

    # ========== FIELDS ==========

    def get_fields(self) -> Dict[str, str]:
        """Return a copy of all fields (including the citation key)."""
        return dict(self._fields)

    def get_field(self, name: str) -> Optional[str]:
        return self._fields.get(name.lower())

    def has_field(self, name: str) -> bool:
        return name.lower() in self._fields

    def set_field(self, name: str, value: str) -> None:
        """Set a field and notify listeners if the value actually changed."""
        key = name.lower()
        old_value = self._fields.get(key)
        if old_value == value:
            return
        self._fields[key] = value
        self._post_event(FieldChangedEvent(self, key, old_value, value))

    def clear_field(self, name: str) -> None:
        key = name.lower()
        if key not in self._fields:
            return
        old_value = self._fields.pop(key)
        self._post_event(FieldChangedEvent(self, key, old_value, None))

    def get_cite_key(self) -> Optional[str]:
        return self._fields.get(KEY_FIELD)

    def set_cite_key(self, cite_key: str) -> None:
        self.set_field(KEY_FIELD, cite_key)

    # ========== LISTENERS ==========

    def register_listener(self, listener: FieldChangeListener) -> None:
        """Register a listener. Registering the same object twice is a no-op."""
        with self._listeners_lock:
            if any(existing is listener for existing in self._listeners):
                return
            self._listeners.append(listener)

    def unregister_listener(self, listener: FieldChangeListener) -> None:
        """Remove a listener by identity. Unknown listeners are ignored."""
        with self._listeners_lock:
            self._listeners = [existing for existing in self._listeners if existing is not listener]

    def has_listener(self, listener: FieldChangeListener) -> bool:
        with self._listeners_lock:
            return any(existing is listener for existing in self._listeners)

    def _post_event(self, event: FieldChangedEvent) -> None:
        # Snapshot so listeners may unregister themselves while being notified
        with self._listeners_lock:
            listeners = list(self._listeners)

        logger.debug(f"Field '{event.field_name}' changed on {self!r}, notifying {len(listeners)} listener(s)")
        for listener in listeners:
            listener.on_field_changed(event)
