# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for restcourier."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"restcourier/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class CourierSettings:
    """Transport, retry and worker defaults."""

    timeout: float = 10.0
    retry_delay: float = 2.0
    default_attempts: int = 1
    cache_max_size: int = 10
    cache_ttl: float = 3600.0
    max_workers: int = 0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "CourierSettings":
        """Create settings from environment variables (evaluated at call time)."""
        cache_max_size = _int_env("RESTCOURIER_CACHE_SIZE", cls.cache_max_size)
        if cache_max_size <= 0:
            cache_max_size = cls.cache_max_size
        max_workers = _int_env("RESTCOURIER_MAX_WORKERS", cls.max_workers)
        if max_workers < 0:
            max_workers = cls.max_workers
        retry_delay = _float_env("RESTCOURIER_RETRY_DELAY", cls.retry_delay)
        if retry_delay < 0:
            retry_delay = cls.retry_delay
        return cls(
            timeout=_float_env("RESTCOURIER_HTTP_TIMEOUT", cls.timeout),
            retry_delay=retry_delay,
            default_attempts=max(1, _int_env("RESTCOURIER_ATTEMPTS", cls.default_attempts)),
            cache_max_size=cache_max_size,
            cache_ttl=_float_env("RESTCOURIER_CACHE_TTL", cls.cache_ttl),
            max_workers=max_workers,
            user_agent=os.getenv("RESTCOURIER_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("RESTCOURIER_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("RESTCOURIER_HTTP_VERIFY_SSL", cls.verify_ssl),
        )


def load_settings() -> CourierSettings:
    """Load settings from environment with sensible defaults."""
    return CourierSettings.from_env()
