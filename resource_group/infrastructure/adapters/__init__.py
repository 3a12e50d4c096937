"""Cleanup handler adapters for host resource types."""

from .cleanup_handlers import call, close, destroy, disconnect

__all__ = [
    "call",
    "close",
    "destroy",
    "disconnect",
]
