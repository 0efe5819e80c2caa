"""Ordinal counter used by layouts that print the entry number."""


class EntryNumberCounter:
    """
    Mutable entry ordinal read by \\entrynumber and the Number formatter.

    The preview resets it to 1 before every render so a layout can print
    "entry #1" for a single previewed entry. It says nothing about any other
    ordering of entries.
    """

    def __init__(self, start: int = 1):
        self.value = start

    def reset(self) -> None:
        self.value = 1

    def increment(self) -> int:
        self.value += 1
        return self.value


# Process-wide counter shared by the preview and exporters
ENTRY_NUMBER = EntryNumberCounter()
