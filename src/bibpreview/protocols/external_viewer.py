"""External viewer protocol for opening links shown in the preview."""

from typing import Any, Protocol, Optional


class ExternalViewer(Protocol):
    """Opens a link (URL, DOI, file) from a previewed entry."""

    def open_external_viewer(self, database_context: Any, link: str, field_name: str) -> None:
        """Open link. Raises ExternalViewerError if it cannot be opened."""
        ...


_external_viewer: Optional[ExternalViewer] = None


def register_external_viewer(viewer: Optional[ExternalViewer]) -> None:
    """Register a global external viewer implementation."""
    global _external_viewer
    _external_viewer = viewer


def get_external_viewer() -> Optional[ExternalViewer]:
    """Get the registered external viewer implementation."""
    return _external_viewer
