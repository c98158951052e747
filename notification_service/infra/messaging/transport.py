"""RabbitMQ transport for notification events using FastStream.

The transport owns the broker session and the ``notification`` queue. It
exposes deliveries as an async iterator; acknowledgement is left to the
caller so that a message is only acked once it has been processed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from faststream.rabbit import RabbitBroker, RabbitQueue

from notification_service.infra.messaging.exceptions import TransportError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from aio_pika.abc import AbstractQueue

    from notification_service.core.settings.rabbit import RabbitSettings
    from notification_service.infra.messaging.events import NotificationEnvelope

logger = logging.getLogger(__name__)


class InboundMessage(Protocol):
    """A single broker delivery awaiting acknowledgement."""

    body: bytes

    async def ack(self) -> None: ...

    async def nack(self, requeue: bool = True) -> None: ...


class NotificationTransport:
    """Broker session bound to the notification queue.

    Example:
        transport = NotificationTransport(get_rabbit_settings())
        await transport.connect()
        async for delivery in transport.receive():
            ...
            await delivery.ack()
        await transport.close()
    """

    def __init__(self, settings: RabbitSettings, broker: RabbitBroker | None = None) -> None:
        self._settings = settings
        self._broker = broker
        self._queue: AbstractQueue | None = None

    @property
    def queue_name(self) -> str:
        return self._settings.notification_queue

    @property
    def is_connected(self) -> bool:
        return self._queue is not None

    async def connect(self) -> None:
        """Open the broker session and declare the notification queue.

        Raises:
            TransportError: If the endpoint is unreachable or does not answer
                within ``connection_timeout`` seconds.
        """
        if self._queue is not None:
            return

        if self._broker is None:
            self._broker = RabbitBroker(
                self._settings.get_url(),
                max_consumers=self._settings.prefetch_count,
                logger=logger,
            )

        logger.info(
            "Connecting to RabbitMQ",
            extra={
                "queue": self.queue_name,
                "connection_timeout": self._settings.connection_timeout,
            },
        )
        try:
            await asyncio.wait_for(
                self._broker.connect(),
                timeout=self._settings.connection_timeout,
            )
            self._queue = await self._broker.declare_queue(
                RabbitQueue(self.queue_name, durable=self._settings.queue_durable),
            )
        except TimeoutError as exc:
            msg = f"RabbitMQ connection timeout after {self._settings.connection_timeout}s"
            raise TransportError(msg) from exc
        except Exception as exc:
            raise TransportError(f"Failed to connect to RabbitMQ: {exc}") from exc

        logger.info("RabbitMQ connection established", extra={"queue": self.queue_name})

    async def receive(self) -> AsyncIterator[InboundMessage]:
        """Yield deliveries from the notification queue until the session closes.

        Raises:
            TransportError: If called before :meth:`connect`.
        """
        if self._queue is None:
            raise TransportError("Transport is not connected. Call connect() first.")
        async with self._queue.iterator() as deliveries:
            async for delivery in deliveries:
                yield delivery

    async def consume(self, handler: Callable[[InboundMessage], Awaitable[None]]) -> None:
        """Invoke ``handler`` once per delivery, acking only after it succeeds.

        A failing handler leaves its delivery un-acked for broker redelivery,
        or requeues it when ``requeue_on_failure`` is enabled.
        """
        async for delivery in self.receive():
            try:
                await handler(delivery)
            except Exception:
                logger.exception("Notification handler failed; message left unacknowledged")
                if self._settings.requeue_on_failure:
                    await delivery.nack(requeue=True)
                continue
            await delivery.ack()

    async def publish(self, envelope: NotificationEnvelope) -> None:
        """Publish an envelope to the notification queue.

        Raises:
            TransportError: If called before :meth:`connect`.
        """
        if self._broker is None or self._queue is None:
            raise TransportError("Transport is not connected. Call connect() first.")
        await self._broker.publish(
            envelope.to_wire(),
            queue=self.queue_name,
            content_type="application/json",
        )

    async def close(self) -> None:
        """Release the broker session."""
        if self._broker is not None:
            await self._broker.close()
        self._queue = None
        logger.info("RabbitMQ connection closed")
