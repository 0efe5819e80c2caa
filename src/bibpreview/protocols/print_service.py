"""Print service protocol for pluggable print backends."""

from typing import Protocol, Optional


class PrintService(Protocol):
    """Prints rendered preview markup. May block; never called on the display thread."""

    def submit(self, content: str, job_label: str) -> None:
        """Print content as a job named job_label. Raises PrinterError on failure."""
        ...


_print_service: Optional[PrintService] = None


def register_print_service(service: Optional[PrintService]) -> None:
    """Register a global print service implementation."""
    global _print_service
    _print_service = service


def get_print_service() -> Optional[PrintService]:
    """Get the registered print service implementation."""
    return _print_service
