"""Policy enums shared by the domain and configuration layers."""

from enum import Enum


class ErrorPolicy(str, Enum):
    """How ``Group.free()`` reports cleanup handler failures.

    Both policies are best effort: every item still gets its cleanup attempt
    and every child is still freed before anything is reported.
    """

    COLLECT = "collect"  # raise one CleanupError once the subtree is released
    LOG = "log"  # log each failure and return normally


__all__ = ["ErrorPolicy"]
