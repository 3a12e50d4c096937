"""
Domain-level exceptions for resource groups.

These exceptions signal genuine misuse (bad construction arguments, invalid
configuration) or collaborator failure (a cleanup handler raising during free).
They are never used for normal control flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence


class ResourceGroupError(Exception):
    """Base exception for all resource group errors."""
    pass


class ValidationError(ResourceGroupError):
    """Raised when construction arguments are invalid."""
    pass


class InvalidCleanupHandlerError(ValidationError):
    """Raised when a group is created without a callable cleanup handler."""

    def __init__(self, handler: Any = None):
        self.handler = handler
        message = f"cleanup_handler must be callable, got {type(handler).__name__}"
        super().__init__(message)


class ConfigurationError(ResourceGroupError):
    """Raised when configuration is invalid or missing."""
    pass


class ProcessingError(ResourceGroupError):
    """Base exception for processing errors."""
    pass


@dataclass(frozen=True)
class CleanupFailure:
    """A single cleanup handler invocation that raised."""

    group_name: Optional[str]
    item: Any
    error: Exception

    def describe(self) -> str:
        group = self.group_name or "<anonymous>"
        return f"{group}: {type(self.error).__name__}: {self.error}"


class CleanupError(ProcessingError):
    """
    Raised after a best-effort free when one or more handlers failed.

    Every item in the freed subtree still received its cleanup attempt; the
    failures are reported in the order they occurred.
    """

    def __init__(self, failures: Sequence[CleanupFailure]):
        self.failures: List[CleanupFailure] = list(failures)

        count = len(self.failures)
        message = f"{count} cleanup handler{'s' if count != 1 else ''} failed"
        if self.failures:
            message += f" (first: {self.failures[0].describe()})"
        super().__init__(message)

    @property
    def errors(self) -> List[Exception]:
        """The underlying exceptions, in occurrence order."""
        return [failure.error for failure in self.failures]


__all__ = [
    "ResourceGroupError",
    "ValidationError",
    "InvalidCleanupHandlerError",
    "ConfigurationError",
    "ProcessingError",
    "CleanupFailure",
    "CleanupError",
]
