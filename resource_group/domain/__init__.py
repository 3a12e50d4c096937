"""Domain layer: the group data structure and its error taxonomy."""

from . import exceptions
from . import interfaces
from .group import Group, create
from .policies import ErrorPolicy

__all__ = [
    "exceptions",
    "interfaces",
    "ErrorPolicy",
    "Group",
    "create",
]
