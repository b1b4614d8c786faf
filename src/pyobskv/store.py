"""Observable in-memory key-value store.

Every committed insert, update or delete is described by a
:class:`~pyobskv.models.mutation.Mutation` and handed synchronously to the
registered observers, in registration order.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Hashable, Mapping
from typing import Any

from pyobskv._observers import Observer, ObserverErrorHook, ObserverRegistry, dispatch
from pyobskv._redact import redact_for_log
from pyobskv.config import StoreConfig
from pyobskv.exceptions import KeyNotFoundError
from pyobskv.models.mutation import ABSENT, Mutation

_logger = logging.getLogger(__name__)


class ObservableStore:
    """In-memory store that notifies observers about every mutation.

    All public operations are coroutines so callers can compose them with
    other asynchronous work. The underlying work is synchronous: a mutation
    is committed and every observer has been called by the time the
    coroutine returns.

    Usage::

        store = ObservableStore()
        await store.observe(print)
        await store.set("speed", 12)
        await store.delete("speed")
    """

    def __init__(
        self,
        initial: Mapping[Hashable, Any] | None = None,
        *,
        config: StoreConfig | None = None,
        on_observer_error: ObserverErrorHook | None = None,
    ) -> None:
        self._config = config if config is not None else StoreConfig()
        self._lock: contextlib.AbstractContextManager[Any] = (
            threading.RLock() if self._config.thread_safe else contextlib.nullcontext()
        )
        self._data: dict[Hashable, Any] = {}
        self._observers = ObserverRegistry()
        self._on_observer_error = on_observer_error

        if initial:
            # Seeding is not a mutation: nobody is observing yet.
            self._data.update((key, value) for key, value in initial.items() if value is not ABSENT)

    @property
    def config(self) -> StoreConfig:
        return self._config

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, key: Hashable, default: Any = ABSENT) -> Any:
        """Return the value stored under *key*, or *default* (``ABSENT``)."""
        with self._lock:
            return self._data.get(key, default)

    async def has(self, key: Hashable) -> bool:
        return key in self

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def keys(self) -> list[Hashable]:
        with self._lock:
            return list(self._data)

    def snapshot(self) -> dict[Hashable, Any]:
        """Shallow copy of the current contents."""
        with self._lock:
            return dict(self._data)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def set(self, key: Hashable, value: Any) -> None:
        """Insert or overwrite *key*.

        Setting ``ABSENT`` deletes the key instead and raises
        :class:`~pyobskv.exceptions.KeyNotFoundError` when it is not stored.
        """
        if value is ABSENT:
            self._delete(key)
            return

        with self._lock:
            old_value = self._data.get(key, ABSENT)
            self._data[key] = value
            self._notify(Mutation(key, old_value, value))

    async def delete(self, key: Hashable) -> None:
        """Remove *key*, raising :class:`~pyobskv.exceptions.KeyNotFoundError` if absent."""
        self._delete(key)

    def _delete(self, key: Hashable) -> None:
        with self._lock:
            old_value = self._data.pop(key, ABSENT)
            if old_value is ABSENT:
                raise KeyNotFoundError(key)
            self._notify(Mutation(key, old_value, ABSENT))

    def _notify(self, mutation: Mutation) -> None:
        """Deliver a committed mutation. Caller holds the lock."""
        if self._config.log_mutations and _logger.isEnabledFor(logging.DEBUG):
            try:
                self._log_mutation(mutation)
            except Exception:
                _logger.debug("Failed to log %s mutation", mutation.kind.value, exc_info=True)
        observers = self._observers.snapshot()
        failures = dispatch(observers, mutation, on_error=self._on_observer_error)
        if failures:
            _logger.debug("%d of %d observers failed for %s mutation", failures, len(observers), mutation.kind.value)

    def _log_mutation(self, mutation: Mutation) -> None:
        max_string = self._config.max_log_string
        key = redact_for_log(mutation.key, max_string=max_string)
        if not self._config.log_values:
            _logger.debug("%s key=%r", mutation.kind.value, key)
            return
        _logger.debug(
            "%s key=%r old=%r new=%r",
            mutation.kind.value,
            key,
            redact_for_log(mutation.old_value, max_string=max_string),
            redact_for_log(mutation.new_value, max_string=max_string),
        )

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    async def observe(self, callback: Observer) -> None:
        """Register *callback* to receive every future :class:`Mutation`.

        Registering the same callback twice is a no-op. Raises
        :class:`~pyobskv.exceptions.InvalidCallbackError` for non-callables.
        """
        with self._lock:
            added = self._observers.add(callback)
        if added:
            _logger.debug("Observer registered: %r", callback)

    async def disconnect(self, callback: Observer) -> None:
        """Stop delivering mutations to *callback*.

        Raises :class:`~pyobskv.exceptions.CallbackNotRegisteredError` when
        *callback* is not registered.
        """
        with self._lock:
            self._observers.remove(callback)
        _logger.debug("Observer removed: %r", callback)

    unobserve = disconnect

    def is_observing(self, callback: object) -> bool:
        with self._lock:
            return callback in self._observers

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)
