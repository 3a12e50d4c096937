"""Domain-layer interfaces.

A parent group only needs to know that each child can be freed; it never sees
the child's item type. ``IFreeable`` is that contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from .exceptions import CleanupFailure


class IFreeable(ABC):
    """Anything a parent group can release transitively."""

    @abstractmethod
    def free(self) -> None:
        """Release everything owned, honouring the configured error policy."""
        pass

    @abstractmethod
    def release_into(self, failures: List[CleanupFailure]) -> None:
        """
        Release everything owned without raising handler errors.

        Handler failures are appended to ``failures`` so the outermost
        ``free()`` can report the whole subtree at once.
        """
        pass

    @property
    @abstractmethod
    def is_freed(self) -> bool:
        """Whether ``free()`` has already run."""
        pass


__all__ = ["IFreeable"]
