"""Built-in cleanup handlers for common resource shapes.

Each handler has the ``(item) -> None`` shape a group expects and is passed in
at construction time::

    connections = create(disconnect)
    widgets = connections.extend(destroy)
    callbacks = connections.extend(call)

Handlers do not catch anything; failures are reported by the owning group.
"""

from __future__ import annotations

from typing import Any, Callable


def disconnect(subscription: Any) -> None:
    """Disconnect an event subscription."""
    subscription.disconnect()


def destroy(obj: Any) -> None:
    """Destroy an owned object."""
    obj.destroy()


def call(callback: Callable[[], Any]) -> None:
    """Invoke a zero-argument cleanup callback."""
    callback()


def close(resource: Any) -> None:
    """Close a file, socket, client or anything else with ``close()``."""
    resource.close()


__all__ = ["call", "close", "destroy", "disconnect"]
