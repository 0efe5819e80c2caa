"""
Collaborator protocols and configuration.

Structural contracts for the surfaces and services the preview talks to,
plus the global preview configuration.
"""

from .display_sink import DisplaySink
from .notification import NotificationSink
from .print_service import PrintService, register_print_service, get_print_service
from .external_viewer import ExternalViewer, register_external_viewer, get_external_viewer
from .preview_config import PreviewConfig, DEFAULT_LAYOUT, set_preview_config, get_preview_config

__all__ = [
    "DisplaySink",
    "NotificationSink",
    "PrintService",
    "register_print_service",
    "get_print_service",
    "ExternalViewer",
    "register_external_viewer",
    "get_external_viewer",
    "PreviewConfig",
    "DEFAULT_LAYOUT",
    "set_preview_config",
    "get_preview_config",
]
