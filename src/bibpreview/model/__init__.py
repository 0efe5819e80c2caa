"""
Bibliographic data model.

Entries with change notification and the database used to resolve
string constants while rendering.
"""

from .entry import BibEntry, FieldChangedEvent, FieldChangeListener
from .database import BibDatabase, BibDatabaseContext

__all__ = [
    "BibEntry",
    "FieldChangedEvent",
    "FieldChangeListener",
    "BibDatabase",
    "BibDatabaseContext",
]
