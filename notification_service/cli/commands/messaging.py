"""Queue consumer and sample producer commands."""

import asyncio
import random

import click

from notification_service.cli.utils import coro, error, info, success
from notification_service.core.settings import (
    get_db_settings,
    get_rabbit_settings,
    get_redis_settings,
)
from notification_service.features.notifications import (
    NotificationConsumer,
    create_notification_service,
)
from notification_service.infra.cache import RedisCache
from notification_service.infra.database import create_engine, create_session_factory
from notification_service.infra.messaging import (
    NotificationEnvelope,
    NotificationTransport,
    NotificationWorker,
    TransportError,
)
from notification_service.infra.observability import TracingObservability


@click.command()
@coro
async def consume() -> None:
    """Consume the notification queue without serving HTTP."""
    rabbit = get_rabbit_settings()
    redis = get_redis_settings()

    engine = create_engine(get_db_settings())
    cache = RedisCache(redis)
    transport = NotificationTransport(rabbit)
    try:
        await cache.connect()
        await transport.connect()
    except Exception as e:
        error(f"Startup failed: {e}")
        await transport.close()
        await cache.disconnect()
        await engine.dispose()
        raise SystemExit(1) from e

    observability = TracingObservability()
    service = create_notification_service(
        create_session_factory(engine),
        cache,
        observability=observability,
        mute_ttl=redis.mute_ttl,
    )
    worker = NotificationWorker(
        transport,
        NotificationConsumer(service, observability),
        capacity=rabbit.channel_capacity,
        consumers=rabbit.consumers,
        requeue_on_failure=rabbit.requeue_on_failure,
    )

    info(f"Consuming queue '{transport.queue_name}' (Ctrl+C to stop)")
    try:
        await worker.run()
    except asyncio.CancelledError:
        info("Stopping consumer")
    finally:
        await worker.stop()
        await transport.close()
        await cache.disconnect()
        await engine.dispose()


@click.command()
@click.option("--count", default=100, show_default=True, type=click.IntRange(min=1))
@click.option("--tenants", default=5, show_default=True, type=click.IntRange(min=1), help="Tenant ids drawn from 1..N")
@click.option("--events", default=10, show_default=True, type=click.IntRange(min=1), help="Event ids drawn from 1..N")
@coro
async def publish(count: int, tenants: int, events: int) -> None:
    """Publish sample notification events for local development."""
    transport = NotificationTransport(get_rabbit_settings())
    try:
        await transport.connect()
    except TransportError as e:
        error(str(e))
        raise SystemExit(1) from e

    try:
        for i in range(count):
            envelope = NotificationEnvelope(
                tenant_id=random.randint(1, tenants),  # noqa: S311
                event_id=random.randint(1, events),  # noqa: S311
                message=f"Notification message {i}",
            )
            await transport.publish(envelope)
    finally:
        await transport.close()

    success(f"Published {count} messages to '{transport.queue_name}'")
