"""
Configuration management for tokenledger.

Handles loading configuration from environment variables and validation.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace
from typing import Any

from tokenledger.core.exceptions import ConfigurationError


def _get_env_var(name: str, default: str | None = None, required: bool = False) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable {name} is not set")
    return value


def _parse_number(name: str, raw: str | None, cast: type) -> Any:
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {name} must be a number, got {raw!r}"
        ) from None


@dataclass(frozen=True)
class Config:
    """Ledger runtime configuration."""

    storage_backend: str = "memory"
    redis_url: str | None = None
    log_level: str = "INFO"
    log_json: bool = False
    env: str = "development"

    # Ledger lock
    lock_ttl: int = 30  # seconds a crashed holder keeps the ledger locked
    lock_retry_count: int = 20
    lock_retry_delay: float = 0.05

    def __post_init__(self) -> None:
        if not self.storage_backend:
            raise ConfigurationError("storage_backend is required")
        if self.lock_ttl <= 0:
            raise ConfigurationError("lock_ttl must be positive")
        if self.lock_retry_count < 0:
            raise ConfigurationError("lock_retry_count must be >= 0")
        if self.lock_retry_delay < 0:
            raise ConfigurationError("lock_retry_delay must be >= 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> Config:
        """Load configuration from environment variables."""
        storage_backend = overrides.get("storage_backend") or _get_env_var(
            "TOKENLEDGER_STORAGE_BACKEND", default=cls.storage_backend
        )
        redis_url = overrides.get("redis_url") or _get_env_var("TOKENLEDGER_REDIS_URL")
        log_level = overrides.get("log_level") or _get_env_var(
            "TOKENLEDGER_LOG_LEVEL", default=cls.log_level
        )
        env = overrides.get("env") or _get_env_var("TOKENLEDGER_ENV", default=cls.env)
        log_json = overrides.get("log_json")
        if log_json is None:
            log_json = (_get_env_var("TOKENLEDGER_LOG_JSON") or "").lower() in ("1", "true", "yes")

        lock_ttl = overrides.get("lock_ttl")
        if lock_ttl is None:
            lock_ttl = _parse_number(
                "TOKENLEDGER_LOCK_TTL", _get_env_var("TOKENLEDGER_LOCK_TTL"), int
            )
        lock_retry_count = overrides.get("lock_retry_count")
        if lock_retry_count is None:
            lock_retry_count = _parse_number(
                "TOKENLEDGER_LOCK_RETRIES", _get_env_var("TOKENLEDGER_LOCK_RETRIES"), int
            )
        lock_retry_delay = overrides.get("lock_retry_delay")
        if lock_retry_delay is None:
            lock_retry_delay = _parse_number(
                "TOKENLEDGER_LOCK_RETRY_DELAY", _get_env_var("TOKENLEDGER_LOCK_RETRY_DELAY"), float
            )

        return cls(
            storage_backend=storage_backend,  # type: ignore
            redis_url=redis_url,
            log_level=log_level,  # type: ignore
            log_json=log_json,
            env=env,  # type: ignore
            lock_ttl=lock_ttl if lock_ttl is not None else cls.lock_ttl,
            lock_retry_count=(
                lock_retry_count if lock_retry_count is not None else cls.lock_retry_count
            ),
            lock_retry_delay=(
                lock_retry_delay if lock_retry_delay is not None else cls.lock_retry_delay
            ),
        )

    def with_updates(self, **updates: Any) -> Config:
        """Create a new Config with updated values."""
        return replace(self, **updates)

    def masked_redis_url(self) -> str | None:
        """Return the Redis URL with any password masked for safe logging."""
        if not self.redis_url:
            return None
        return re.sub(r"(://[^:/@]*:)[^@]*@", r"\1****@", self.redis_url)
