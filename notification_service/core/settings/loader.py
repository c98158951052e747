"""Cached settings loaders.

Each loader validates its settings once per process. Tests that change the
environment call :func:`clear_settings_cache` afterwards, or construct a
settings class directly with overrides:

    settings = RabbitSettings(notification_queue="test-notification")
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .auth import AuthSettings
from .logs import LoggingSettings
from .postgres import PostgresSettings
from .rabbit import RabbitSettings
from .redis import RedisSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> PostgresSettings:
    """Notification store connection (``DB_`` prefix)."""
    return PostgresSettings()


@lru_cache(maxsize=1)
def get_redis_settings() -> RedisSettings:
    """Mute-setting cache connection (``REDIS_`` prefix)."""
    return RedisSettings()


@lru_cache(maxsize=1)
def get_rabbit_settings() -> RabbitSettings:
    """Broker connection and notification queue options (``RABBIT_`` prefix)."""
    return RabbitSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    return AuthSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


_LOADERS = (
    get_app_settings,
    get_db_settings,
    get_redis_settings,
    get_rabbit_settings,
    get_auth_settings,
    get_logging_settings,
)


def clear_settings_cache() -> None:
    """Drop every cached settings instance so the next call re-reads the environment."""
    for loader in _LOADERS:
        loader.cache_clear()
