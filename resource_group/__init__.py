"""Release live resources exactly once, in bulk, through composable groups."""

from .domain.exceptions import (
    CleanupError,
    CleanupFailure,
    ConfigurationError,
    InvalidCleanupHandlerError,
    ProcessingError,
    ResourceGroupError,
    ValidationError,
)
from .domain.group import CleanupHandler, DisconnectFn, Group, create
from .domain.interfaces import IFreeable
from .domain.policies import ErrorPolicy
from .infrastructure.adapters import call, close, destroy, disconnect

__version__ = "1.0.0"

__all__ = [
    # Core
    "Group",
    "create",
    "CleanupHandler",
    "DisconnectFn",
    "IFreeable",
    "ErrorPolicy",

    # Cleanup handlers
    "call",
    "close",
    "destroy",
    "disconnect",

    # Errors
    "ResourceGroupError",
    "ValidationError",
    "InvalidCleanupHandlerError",
    "ConfigurationError",
    "ProcessingError",
    "CleanupError",
    "CleanupFailure",
]
