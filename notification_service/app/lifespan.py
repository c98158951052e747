"""Application lifespan management.

Startup Order:
1. Core (logging) - always runs first
2. Database (PostgreSQL) - engine and session factory
3. Cache (Redis) - mute-setting cache backend
4. Notification services - store, mute cache, orchestrator, token decoder
5. Messaging (RabbitMQ) - transport and queue worker, optional

Shutdown Order: Reverse of startup (what starts first, shuts down last)

When RabbitMQ is unreachable the API starts without a worker (degraded mode)
unless ``RABBIT_STARTUP_REQUIRE_RABBIT`` is set. The same applies to Redis
with ``REDIS_STARTUP_REQUIRE_CACHE``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from notification_service.core.settings import (
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_logging_settings,
    get_rabbit_settings,
    get_redis_settings,
)
from notification_service.features.notifications import (
    NotificationConsumer,
    create_notification_service,
)
from notification_service.infra.auth import TokenDecoder
from notification_service.infra.cache import RedisCache
from notification_service.infra.database import (
    check_database_health,
    create_engine,
    create_session_factory,
)
from notification_service.infra.logging import setup_logging
from notification_service.infra.messaging import (
    NotificationTransport,
    NotificationWorker,
    TransportError,
)
from notification_service.infra.observability import TracingObservability

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


# =============================================================================
# Startup functions - organized by service
# =============================================================================


async def _startup_core() -> None:
    """Configure logging."""
    app = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )


async def _startup_database(app: FastAPI) -> None:
    """Create the engine and session factory for the notification store."""
    db = get_db_settings()
    engine = create_engine(db)
    app.state.db_engine = engine
    app.state.session_factory = create_session_factory(engine)

    if await check_database_health(engine):
        logger.info("Database connection initialized")
    else:
        logger.warning("Database unavailable, continuing in degraded mode")


async def _startup_cache(app: FastAPI) -> None:
    """Connect to Redis."""
    settings = get_redis_settings()
    cache = RedisCache(settings)
    app.state.cache = cache

    try:
        await cache.connect()
    except Exception as e:
        if settings.startup_require_cache:
            logger.exception(
                "Redis required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_cache": True},
            )
            raise
        logger.warning(
            "Redis unavailable, will reconnect on first use",
            extra={"error": str(e), "startup_require_cache": False},
        )


def _startup_services(app: FastAPI) -> None:
    """Wire the notification services and store them on ``app.state``."""
    observability = TracingObservability()
    app.state.observability = observability
    app.state.notification_service = create_notification_service(
        app.state.session_factory,
        app.state.cache,
        observability=observability,
        mute_ttl=get_redis_settings().mute_ttl,
    )
    app.state.token_decoder = TokenDecoder(get_auth_settings())

    async def health_check() -> tuple[bool, bool]:
        return (
            await check_database_health(app.state.db_engine),
            await app.state.cache.health_check(),
        )

    app.state.health_check = health_check


async def _startup_messaging(app: FastAPI) -> None:
    """Connect to RabbitMQ and start the notification worker."""
    settings = get_rabbit_settings()
    app.state.notification_transport = None
    app.state.notification_worker = None

    if not settings.is_configured:
        logger.warning("RabbitMQ not configured - notification consumption disabled")
        return

    transport = NotificationTransport(settings)
    try:
        await transport.connect()
    except TransportError as e:
        if settings.startup_require_rabbit:
            logger.exception(
                "RabbitMQ required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_rabbit": True},
            )
            raise
        logger.warning(
            "RabbitMQ unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_rabbit": False},
        )
        return

    worker = NotificationWorker(
        transport,
        NotificationConsumer(app.state.notification_service, app.state.observability),
        capacity=settings.channel_capacity,
        consumers=settings.consumers,
        requeue_on_failure=settings.requeue_on_failure,
    )
    await worker.start()
    app.state.notification_transport = transport
    app.state.notification_worker = worker


# =============================================================================
# Shutdown functions
# =============================================================================


async def _shutdown_messaging(app: FastAPI) -> None:
    worker: NotificationWorker | None = getattr(app.state, "notification_worker", None)
    if worker is not None:
        await worker.stop()
    transport: NotificationTransport | None = getattr(app.state, "notification_transport", None)
    if transport is not None:
        await transport.close()


async def _shutdown_cache(app: FastAPI) -> None:
    cache: RedisCache | None = getattr(app.state, "cache", None)
    if cache is not None:
        await cache.disconnect()


async def _shutdown_database(app: FastAPI) -> None:
    engine = getattr(app.state, "db_engine", None)
    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan events."""
    await _startup_core()
    await _startup_database(app)
    try:
        await _startup_cache(app)
        _startup_services(app)
        await _startup_messaging(app)
    except Exception:
        await _shutdown_cache(app)
        await _shutdown_database(app)
        raise

    logger.info("Application startup complete")
    try:
        yield
    finally:
        logger.info("Application shutting down")
        await _shutdown_messaging(app)
        await _shutdown_cache(app)
        await _shutdown_database(app)
        logger.info("Application shutdown complete")
