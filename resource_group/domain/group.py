"""
Resource group: collect live resources and release them all at once.

A ``Group`` owns an ordered sequence of items plus a single cleanup handler
that knows how to release them. ``free()`` runs the handler over every item in
insertion order, then frees every child group created through ``extend()``.

Each ``add``/``add_many`` call returns a disconnect function scoped to the
entries that call inserted, so the same value added twice can be withdrawn
once without affecting the other addition.

Example::

    group = create(disconnect)
    group.add(button.clicked.connect(on_click))

    timers = group.extend(call)
    timers.add(cancel_timer)

    group.free()  # disconnects, then cancels the timer
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Generic, Iterable, List, Optional, TypeVar, Union

import structlog

from resource_group.core.config import get_settings
from resource_group.domain.exceptions import (
    CleanupError,
    CleanupFailure,
    InvalidCleanupHandlerError,
    ValidationError,
)
from resource_group.domain.interfaces import IFreeable
from resource_group.domain.policies import ErrorPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")
A = TypeVar("A")

CleanupHandler = Callable[[T], Any]
DisconnectFn = Callable[[], None]


def _noop() -> None:
    return None


def _resolve_policy(
    value: Optional[Union[ErrorPolicy, str]], default: ErrorPolicy
) -> ErrorPolicy:
    if value is None:
        return default
    try:
        return ErrorPolicy(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown error policy: {value!r}") from exc


class _Entry(Generic[T]):
    """
    One inserted record.

    Entries compare by identity, which is what lets a disconnect remove its
    own records even when another call inserted an equal value.
    """

    __slots__ = ("item",)

    def __init__(self, item: T):
        self.item = item


class Group(IFreeable, Generic[T]):
    """
    Ordered collection of items released together by one cleanup handler.

    Groups are single-threaded: callers sharing a group across threads must
    synchronise externally.
    """

    def __init__(
        self,
        cleanup_handler: Optional[CleanupHandler] = None,
        initial_items: Optional[Iterable[T]] = None,
        *,
        name: Optional[str] = None,
        error_policy: Optional[Union[ErrorPolicy, str]] = None,
    ):
        """
        Initialize an active group.

        Args:
            cleanup_handler: Called once per item during ``free()``
            initial_items: Items appended in order, without disconnect handles
            name: Label used in log events and failure reports
            error_policy: Overrides the configured ``ERROR_POLICY`` default

        Raises:
            InvalidCleanupHandlerError: If ``cleanup_handler`` is not callable
            ValidationError: If ``error_policy`` names no known policy
        """
        if cleanup_handler is None or not callable(cleanup_handler):
            raise InvalidCleanupHandlerError(cleanup_handler)

        settings = get_settings()

        self._cleanup_handler = cleanup_handler
        self._name = name
        self._error_policy = _resolve_policy(error_policy, settings.ERROR_POLICY)
        self._warn_after_free = settings.WARN_ON_USE_AFTER_FREE
        self._entries: Deque[_Entry[T]] = deque()
        self._children: List[IFreeable] = []
        self._freed = False
        # Failure collector of the free currently in progress, if any
        self._active_failures: Optional[List[CleanupFailure]] = None

        if initial_items is not None:
            self._entries.extend(_Entry(item) for item in initial_items)

        logger.debug(
            "Resource group created",
            group=self._name,
            items=len(self._entries),
            error_policy=self._error_policy.value,
        )

    # ------------------------------------------------------------------
    # Introspection

    @property
    def items(self) -> List[T]:
        """Snapshot of the items that will be released by ``free()``."""
        return [entry.item for entry in self._entries]

    @property
    def cleanup_handler(self) -> CleanupHandler:
        return self._cleanup_handler

    @property
    def children(self) -> List[IFreeable]:
        """Child groups, in creation order."""
        return list(self._children)

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def error_policy(self) -> ErrorPolicy:
        return self._error_policy

    @property
    def is_freed(self) -> bool:
        return self._freed

    # ------------------------------------------------------------------
    # Mutation

    def add(self, item: T) -> DisconnectFn:
        """Append ``item``; the returned function withdraws this addition only."""
        if self._freed:
            return self._release_late([item])

        entry = _Entry(item)
        self._entries.append(entry)
        return self._disconnector([entry])

    def add_many(self, src: Iterable[T]) -> DisconnectFn:
        """Append every element of ``src`` in order; one function withdraws them all."""
        if self._freed:
            return self._release_late(list(src))

        entries = [_Entry(item) for item in src]
        self._entries.extend(entries)
        return self._disconnector(entries)

    def extend(
        self,
        new_cleanup_handler: Callable[[A], Any],
        initial_items: Optional[Iterable[A]] = None,
        *,
        name: Optional[str] = None,
    ) -> "Group[A]":
        """
        Create a child group that this group frees transitively.

        The child may hold a different item type and is otherwise an
        independent group. It inherits this group's error policy.
        """
        child: Group[A] = Group(
            new_cleanup_handler,
            initial_items,
            name=name,
            error_policy=self._error_policy,
        )
        self._children.append(child)

        logger.debug(
            "Child group extended",
            group=self._name,
            child=name,
            children=len(self._children),
        )

        if self._freed:
            if self._warn_after_free:
                logger.warning("Child extended from freed group; freeing it immediately",
                               group=self._name, child=name)
            if self._active_failures is not None:
                child.release_into(self._active_failures)
            else:
                child.free()

        return child

    # ------------------------------------------------------------------
    # Release

    def free(self) -> None:
        """
        Release every item, then every child group.

        Items are processed in insertion order and this group's items are
        all processed before any child is visited. A second call is a no-op.

        A ``KeyboardInterrupt`` or other ``BaseException`` raised by a handler
        propagates, but only after the rest of the subtree has been released.

        Raises:
            CleanupError: Under the ``collect`` policy, when any handler in
                the subtree raised. Raised only after the whole subtree has
                been released.
        """
        failures: List[CleanupFailure] = []
        self.release_into(failures)
        self._report(failures)

    def release_into(self, failures: List[CleanupFailure]) -> None:
        """Release the subtree, appending handler failures to ``failures``."""
        if self._freed:
            return

        # Marked first so that re-entrant calls from handlers see a freed group
        self._freed = True
        self._active_failures = failures
        already_failed = len(failures)

        try:
            released = self._drain(failures)
        except BaseException:
            self._drain(failures)
            raise
        finally:
            self._active_failures = None

        logger.debug(
            "Resource group freed",
            group=self._name,
            items=released,
            children=len(self._children),
            failures=len(failures) - already_failed,
        )

    def _drain(self, failures: List[CleanupFailure]) -> int:
        released = 0
        while self._entries:
            entry = self._entries.popleft()
            released += 1
            self._invoke(entry.item, failures)

        for child in list(self._children):
            child.release_into(failures)

        return released

    def _invoke(self, item: T, failures: List[CleanupFailure]) -> None:
        try:
            self._cleanup_handler(item)
        except Exception as exc:
            failures.append(CleanupFailure(group_name=self._name, item=item, error=exc))

    def _report(self, failures: List[CleanupFailure]) -> None:
        if not failures:
            return

        if self._error_policy is ErrorPolicy.LOG:
            for failure in failures:
                logger.warning(
                    "Cleanup handler failed",
                    group=failure.group_name,
                    item=repr(failure.item),
                    error=str(failure.error),
                    error_type=type(failure.error).__name__,
                )
            return

        raise CleanupError(failures)

    def _release_late(self, items: List[T]) -> DisconnectFn:
        """Release items handed to a group that has already been freed."""
        if self._warn_after_free:
            logger.warning("Items added to freed group; releasing immediately",
                           group=self._name, count=len(items))

        # During a free, failures join that free's report
        if self._active_failures is not None:
            for item in items:
                self._invoke(item, self._active_failures)
            return _noop

        failures: List[CleanupFailure] = []
        for item in items:
            self._invoke(item, failures)
        self._report(failures)
        return _noop

    def _disconnector(self, entries: List[_Entry[T]]) -> DisconnectFn:
        if not entries:
            return _noop

        pending = entries

        def disconnect() -> None:
            if not pending:
                return
            doomed = {id(entry) for entry in pending}
            self._entries = deque(entry for entry in self._entries if id(entry) not in doomed)
            pending.clear()

        return disconnect

    # ------------------------------------------------------------------
    # Protocols

    def __enter__(self) -> "Group[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.free()
            return

        # The body's exception takes precedence over cleanup failures
        try:
            self.free()
        except CleanupError as cleanup_error:
            logger.warning(
                "Cleanup failed while handling another exception",
                group=self._name,
                failures=len(cleanup_error.failures),
                original_error=str(exc_val),
            )

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        state = "freed" if self._freed else "active"
        label = f" {self._name!r}" if self._name else ""
        return (
            f"<Group{label} items={len(self._entries)} "
            f"children={len(self._children)} {state}>"
        )


def create(
    cleanup_handler: Optional[CleanupHandler] = None,
    initial_items: Optional[Iterable[T]] = None,
    *,
    name: Optional[str] = None,
    error_policy: Optional[Union[ErrorPolicy, str]] = None,
) -> Group[T]:
    """Create a root group. See ``Group.__init__`` for the arguments."""
    return Group(cleanup_handler, initial_items, name=name, error_policy=error_policy)


__all__ = ["CleanupHandler", "DisconnectFn", "Group", "create"]
