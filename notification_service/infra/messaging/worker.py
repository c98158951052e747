"""Bounded-channel worker that drives notification processing.

A feeder task drains the transport into an ``asyncio.Queue``; worker tasks
take deliveries off the queue and run them through the handler. Each delivery
moves through ``received -> decoded -> handled -> acked``; it is only
acknowledged once the handler returns.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Protocol

from notification_service.infra.logging import clear_log_context, set_log_context
from notification_service.infra.messaging.events import decode_envelope
from notification_service.infra.messaging.exceptions import DecodeError
from notification_service.infra.metrics import consumed_messages_total

if TYPE_CHECKING:
    from notification_service.infra.messaging.events import NotificationEnvelope
    from notification_service.infra.messaging.transport import (
        InboundMessage,
        NotificationTransport,
    )

logger = logging.getLogger(__name__)


class EnvelopeHandler(Protocol):
    """Receiver of decoded notification envelopes."""

    async def handle_message(self, envelope: NotificationEnvelope) -> None: ...

    async def handle_decode_error(self, error: DecodeError) -> None: ...


class NotificationWorker:
    """Consume the notification queue through a bounded channel.

    Deliveries that fail, or cannot be decoded, are left un-acked and keep
    holding a QoS prefetch slot until the channel closes. Once
    ``prefetch_count`` such deliveries accumulate the broker stops sending;
    restarting the consumer returns them to the queue.

    Args:
        transport: Connected transport to receive deliveries from.
        handler: Processes decoded envelopes and decode failures.
        capacity: Maximum number of deliveries buffered in memory.
        consumers: Number of concurrent worker tasks.
        requeue_on_failure: ``nack(requeue=True)`` failed deliveries instead
            of leaving them un-acked.
    """

    def __init__(
        self,
        transport: NotificationTransport,
        handler: EnvelopeHandler,
        *,
        capacity: int = 100,
        consumers: int = 1,
        requeue_on_failure: bool = False,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if consumers < 1:
            raise ValueError("consumers must be at least 1")
        self._transport = transport
        self._handler = handler
        self._capacity = capacity
        self._consumers = consumers
        self._requeue_on_failure = requeue_on_failure
        self._channel: asyncio.Queue[InboundMessage] | None = None
        self._feeder: asyncio.Task[None] | None = None
        self._workers: list[asyncio.Task[None]] = []

    @property
    def is_running(self) -> bool:
        return self._feeder is not None and not self._feeder.done()

    async def start(self) -> None:
        """Start the feeder and worker tasks."""
        if self.is_running:
            return
        self._channel = asyncio.Queue(maxsize=self._capacity)
        self._workers = [
            asyncio.create_task(self._work(self._channel), name=f"notification-worker-{index}")
            for index in range(self._consumers)
        ]
        self._feeder = asyncio.create_task(self._feed(self._channel), name="notification-feeder")
        logger.info(
            "Notification worker started",
            extra={"capacity": self._capacity, "consumers": self._consumers},
        )

    async def run(self) -> None:
        """Start the worker and block until the transport stops delivering."""
        await self.start()
        await self.join()

    async def join(self) -> None:
        """Wait for the feeder to finish and the channel to drain, then stop."""
        try:
            if self._feeder is not None:
                with contextlib.suppress(asyncio.CancelledError):
                    await self._feeder
            if self._channel is not None:
                await self._channel.join()
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Cancel the feeder and all worker tasks and wait for them to exit."""
        tasks = [task for task in (self._feeder, *self._workers) if task is not None]
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("Notification worker task failed", exc_info=result)
        self._feeder = None
        self._workers = []
        self._channel = None
        if tasks:
            logger.info("Notification worker stopped")

    async def _feed(self, channel: asyncio.Queue[InboundMessage]) -> None:
        async for delivery in self._transport.receive():
            # Blocks while the channel is full
            await channel.put(delivery)
        logger.info("Transport stopped delivering messages")

    async def _work(self, channel: asyncio.Queue[InboundMessage]) -> None:
        while True:
            delivery = await channel.get()
            try:
                await self.process(delivery)
            except Exception:
                logger.exception("Unexpected failure while processing delivery")
            finally:
                channel.task_done()

    async def process(self, delivery: InboundMessage) -> bool:
        """Run one delivery through decode, handle and ack.

        Returns:
            True if the delivery was acknowledged.
        """
        clear_log_context()
        try:
            envelope = decode_envelope(delivery.body)
        except DecodeError as exc:
            logger.warning("Rejected malformed notification message", extra={"reason": str(exc)})
            consumed_messages_total.labels(outcome="decode_error").inc()
            await self._handler.handle_decode_error(exc)
            return False

        set_log_context(tenant_id=envelope.tenant_id, event_id=envelope.event_id)
        try:
            await self._handler.handle_message(envelope)
        except Exception:
            logger.exception("Notification processing failed; message left unacknowledged")
            consumed_messages_total.labels(outcome="failed").inc()
            if self._requeue_on_failure:
                await delivery.nack(requeue=True)
            return False
        finally:
            clear_log_context()

        await delivery.ack()
        consumed_messages_total.labels(outcome="acked").inc()
        return True
