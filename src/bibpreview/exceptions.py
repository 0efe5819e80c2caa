"""Preview exceptions."""


class PreviewError(Exception):
    """Base class for errors raised by the preview components."""


class LayoutCompileError(PreviewError):
    """Raised when a layout string cannot be compiled."""


class PrinterError(PreviewError):
    """Raised when a print service cannot print the preview."""


class ExternalViewerError(PreviewError):
    """Raised when a link from the preview cannot be opened."""
