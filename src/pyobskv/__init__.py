"""pyobskv - Observable in-memory key-value store with an async API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyobskv")
except PackageNotFoundError:
    __version__ = "0+local"
from pyobskv.config import StoreConfig
from pyobskv.exceptions import (
    CallbackNotRegisteredError,
    InvalidCallbackError,
    KeyNotFoundError,
    ObserverError,
    ObsKvConfigError,
    ObsKvError,
)
from pyobskv.models import ABSENT, Absent, Mutation, MutationKind
from pyobskv.store import ObservableStore

__all__ = [
    "__version__",
    "ABSENT",
    "Absent",
    "CallbackNotRegisteredError",
    "InvalidCallbackError",
    "KeyNotFoundError",
    "Mutation",
    "MutationKind",
    "ObservableStore",
    "ObserverError",
    "ObsKvConfigError",
    "ObsKvError",
    "StoreConfig",
]
