"""Custom exception hierarchy for pyobskv."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any


class ObsKvError(Exception):
    """Base exception for all pyobskv errors."""


class ObsKvConfigError(ObsKvError):
    """Invalid configuration value."""


class KeyNotFoundError(ObsKvError, KeyError):
    """A delete (or a set with ``ABSENT``) targeted a key that is not stored."""

    def __init__(self, key: Hashable) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Key was not found: {self.key!r}"


class ObserverError(ObsKvError):
    """Observer registration failed."""

    def __init__(self, message: str, *, callback: Any = None) -> None:
        self.callback = callback
        super().__init__(message)


class InvalidCallbackError(ObserverError, TypeError):
    """``observe`` was given something that cannot be used as an observer.

    Raised for non-callables and for callables that are unhashable and
    therefore cannot be kept in the observer set.
    """


class CallbackNotRegisteredError(ObserverError):
    """``disconnect`` was given a callback that is not currently registered."""
