"""
bibpreview: Live bibliographic entry preview for PyQt6.

Renders one bibliographic entry through a layout into a scrollable,
printable panel and keeps it up to date as the entry changes.

Architecture:
- model: BibEntry with field change listeners, BibDatabase string resolution
- layout: Reference layout engine (LayoutHelper → Layout)
- core: Display-thread marshaling and background tasks
- protocols: Collaborator contracts and PreviewConfig
- preview: LivePreviewRenderer, the entry → rendered text pipeline
- widgets: PreviewPanel and Qt adapters
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
