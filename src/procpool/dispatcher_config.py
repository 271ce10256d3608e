"""Immutable dispatcher configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .config import ConfigurationError, env_int, env_str
from .process_census import CENSUS_BACKENDS

DEFAULT_MAX_CONCURRENT = 5
DEFAULT_POLL_INTERVAL_MS = 1000
DEFAULT_MAX_PROCESS_AGE_MS = 3000
DEFAULT_POLL_LIMIT = 1000
DEFAULT_CENSUS_BACKEND = "psutil"

ENV_PREFIX = "PROCPOOL_"


@dataclass(frozen=True)
class DispatcherConfig:
    """Settings fixed at dispatcher construction."""

    base_command: str
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    max_process_age_ms: int = DEFAULT_MAX_PROCESS_AGE_MS
    poll_limit: int = DEFAULT_POLL_LIMIT
    output_sink: str = os.devnull
    census_backend: str = DEFAULT_CENSUS_BACKEND

    def __post_init__(self) -> None:
        if not self.base_command or not self.base_command.strip():
            raise ConfigurationError.missing_value("base_command")
        if self.max_concurrent < 1:
            raise ConfigurationError.invalid_value("max_concurrent", self.max_concurrent, "Must be at least 1")
        if self.poll_interval_ms <= 0:
            raise ConfigurationError.invalid_value("poll_interval_ms", self.poll_interval_ms, "Must be positive")
        if self.max_process_age_ms <= 0:
            raise ConfigurationError.invalid_value("max_process_age_ms", self.max_process_age_ms, "Must be positive")
        if self.poll_limit < 0:
            raise ConfigurationError.invalid_value("poll_limit", self.poll_limit, "Must be non-negative")
        if not self.output_sink:
            raise ConfigurationError.missing_value("output_sink")
        if self.census_backend not in CENSUS_BACKENDS:
            raise ConfigurationError.invalid_value(
                "census_backend", self.census_backend, f"Expected one of {', '.join(CENSUS_BACKENDS)}"
            )

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0

    @property
    def max_process_age_seconds(self) -> float:
        return self.max_process_age_ms / 1000.0

    @classmethod
    def from_env(cls, base_command: Optional[str] = None, **overrides: Any) -> "DispatcherConfig":
        """Build a configuration from ``PROCPOOL_*`` environment variables and dotenv defaults.

        Keyword overrides that are not ``None`` take precedence over the environment.
        """
        explicit = {key: value for key, value in overrides.items() if value is not None}
        values: Dict[str, Any] = {
            "base_command": base_command or env_str(f"{ENV_PREFIX}BASE_COMMAND", required=True),
        }
        for name, (reader, default) in _ENV_READERS.items():
            values[name] = explicit.pop(name) if name in explicit else reader(f"{ENV_PREFIX}{name.upper()}", default)
        if explicit:
            raise ConfigurationError.invalid_value("overrides", sorted(explicit), "Unknown configuration keys")
        return cls(**values)


_ENV_READERS: Dict[str, Tuple[Callable[..., Any], Any]] = {
    "max_concurrent": (env_int, DEFAULT_MAX_CONCURRENT),
    "poll_interval_ms": (env_int, DEFAULT_POLL_INTERVAL_MS),
    "max_process_age_ms": (env_int, DEFAULT_MAX_PROCESS_AGE_MS),
    "poll_limit": (env_int, DEFAULT_POLL_LIMIT),
    "output_sink": (env_str, os.devnull),
    "census_backend": (env_str, DEFAULT_CENSUS_BACKEND),
}


__all__ = ["DispatcherConfig"]
