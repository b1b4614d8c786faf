"""Store configuration for pyobskv."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyobskv.exceptions import ObsKvConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StoreConfig:
    """Store configuration.

    Parameters
    ----------
    thread_safe : bool
        Guard the map and the observer set with a re-entrant lock so the
        store can be shared between threads. Disable only when every call
        happens on a single thread (e.g. one asyncio event loop).
    log_mutations : bool
        Emit a DEBUG log record for every committed mutation.
    log_values : bool
        Include old/new values in mutation logs. Values are passed through
        :func:`pyobskv._redact.redact_for_log` first.
    max_log_string : int
        Strings and reprs longer than this are truncated in logs.
    """

    thread_safe: bool = True
    log_mutations: bool = False
    log_values: bool = False
    max_log_string: int = 128

    def __post_init__(self) -> None:
        if isinstance(self.max_log_string, bool) or not isinstance(self.max_log_string, int):
            raise ObsKvConfigError(f"max_log_string must be an int, got {type(self.max_log_string).__name__}")
        if self.max_log_string <= 0:
            raise ObsKvConfigError(f"max_log_string must be positive, got {self.max_log_string}")

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from environment variables.

        Reads the optional ``OBSKV_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        StoreConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_BOOL_MAP = {
            "OBSKV_THREAD_SAFE": ("thread_safe", True),
            "OBSKV_LOG_MUTATIONS": ("log_mutations", False),
            "OBSKV_LOG_VALUES": ("log_values", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        max_string_env = env.get("OBSKV_MAX_LOG_STRING")
        if max_string_env is not None and "max_log_string" not in overrides:
            try:
                config_kwargs["max_log_string"] = int(max_string_env)
            except ValueError as exc:
                raise ObsKvConfigError(f"OBSKV_MAX_LOG_STRING must be an integer, got {max_string_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
