"""Modular Pydantic Settings v2 configuration.

One frozen settings class per domain, each with its own environment prefix:

- APP_    application metadata and HTTP server options
- DB_     PostgreSQL connection (notification store)
- REDIS_  Redis connection (mute-setting cache)
- RABBIT_ RabbitMQ connection and notification queue options
- AUTH_   bearer token decoding
- LOG_    logging

Import settings via cached loaders:
    from notification_service.core.settings import get_rabbit_settings

    settings = get_rabbit_settings()
    print(settings.notification_queue)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file (development only)
"""

from __future__ import annotations

from .app import AppSettings
from .auth import AuthSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_logging_settings,
    get_rabbit_settings,
    get_redis_settings,
)
from .logs import LoggingSettings
from .postgres import PostgresSettings
from .rabbit import RabbitSettings
from .redis import RedisSettings

__all__ = [
    "AppSettings",
    "AuthSettings",
    "LoggingSettings",
    "PostgresSettings",
    "RabbitSettings",
    "RedisSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_auth_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_rabbit_settings",
    "get_redis_settings",
]
