"""Notification sink protocol for user-visible error messages."""

from typing import Protocol


class NotificationSink(Protocol):
    """Shows errors to the user. Called on the display thread."""

    def show_error(self, title: str, message: str) -> None:
        ...
