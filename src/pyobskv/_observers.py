"""Internal observer bookkeeping for ObservableStore.

Owns:
- the insertion-ordered, duplicate-free set of observer callbacks
- delivery of a mutation to every observer, isolating observer failures
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pyobskv.exceptions import CallbackNotRegisteredError, InvalidCallbackError
from pyobskv.models.mutation import Mutation

Observer = Callable[[Mutation], object]
ObserverErrorHook = Callable[[Observer, Mutation, Exception], object]

_logger = logging.getLogger(__name__)


class ObserverRegistry:
    """Ordered set of observers.

    Callbacks are keyed by hash/equality: a plain function is the same
    observer only as itself, while ``obj.method`` compares equal to any
    other ``obj.method`` bound to the same instance. Not thread-safe on its
    own; the owning store serializes access.
    """

    def __init__(self) -> None:
        # dict preserves insertion order and gives O(1) membership.
        self._observers: dict[Observer, None] = {}

    def __len__(self) -> int:
        return len(self._observers)

    def __contains__(self, callback: object) -> bool:
        try:
            return callback in self._observers
        except TypeError:
            return False

    def add(self, callback: Observer) -> bool:
        """Register *callback*; return ``False`` when it was already registered."""
        if not callable(callback):
            raise InvalidCallbackError(
                f"Callback should be callable, got {type(callback).__name__}",
                callback=callback,
            )
        try:
            if callback in self._observers:
                return False
        except TypeError as exc:
            raise InvalidCallbackError(
                f"Callback should be hashable, got unhashable {type(callback).__name__}",
                callback=callback,
            ) from exc
        self._observers[callback] = None
        return True

    def remove(self, callback: Observer) -> None:
        if callback not in self:
            raise CallbackNotRegisteredError("Callback is not registered", callback=callback)
        del self._observers[callback]

    def snapshot(self) -> tuple[Observer, ...]:
        return tuple(self._observers)


def dispatch(
    observers: tuple[Observer, ...],
    mutation: Mutation,
    *,
    on_error: ObserverErrorHook | None = None,
) -> int:
    """Call every observer with *mutation*, in order.

    An observer raising ``Exception`` is logged (and reported to *on_error*)
    and the round continues with the next observer. Returns the number of
    observers that failed.
    """
    failures = 0
    for observer in observers:
        try:
            observer(mutation)
        except Exception as exc:
            failures += 1
            _logger.warning(
                "Observer %r failed for %s of key=%r",
                observer,
                mutation.kind.value,
                mutation.key,
                exc_info=True,
            )
            if on_error is None:
                continue
            try:
                on_error(observer, mutation, exc)
            except Exception:
                _logger.debug("on_observer_error callback failed", exc_info=True)
    return failures
