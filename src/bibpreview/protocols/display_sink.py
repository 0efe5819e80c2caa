"""Display sink protocol: the UI surface that shows rendered previews."""

from typing import Protocol


class DisplaySink(Protocol):
    """Surface written by LivePreviewRenderer. Only touched on the display thread."""

    def set_text(self, text: str) -> None:
        ...

    def scroll_to_origin(self) -> None:
        ...

    def select_all(self) -> None:
        ...

    def copy_selection_to_clipboard(self) -> None:
        ...

    def clear_selection(self) -> None:
        ...
