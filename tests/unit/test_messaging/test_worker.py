"""Unit tests for the bounded-channel notification worker."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from notification_service.infra.messaging import DecodeError, NotificationEnvelope, NotificationWorker
from notification_service.infra.metrics import REGISTRY
from tests.utils import FakeDelivery, FakeTransport, envelope_body


def make_handler(**kwargs) -> AsyncMock:
    handler = AsyncMock()
    handler.handle_message = AsyncMock(**kwargs)
    handler.handle_decode_error = AsyncMock()
    return handler


class TestProcess:
    """Tests for NotificationWorker.process (one delivery)."""

    async def test_acks_after_handler_succeeds(self):
        handler = make_handler()
        delivery = FakeDelivery(envelope_body(1, 2, "hi"))
        worker = NotificationWorker(FakeTransport([]), handler)

        assert await worker.process(delivery) is True

        handler.handle_message.assert_awaited_once_with(
            NotificationEnvelope(tenant_id=1, event_id=2, message="hi")
        )
        assert delivery.acked is True

    async def test_handler_failure_leaves_message_unacked(self):
        handler = make_handler(side_effect=RuntimeError("boom"))
        delivery = FakeDelivery(envelope_body())
        worker = NotificationWorker(FakeTransport([]), handler)

        assert await worker.process(delivery) is False

        assert delivery.acked is False
        assert delivery.nacked is False

    async def test_handler_failure_requeues_when_configured(self):
        handler = make_handler(side_effect=RuntimeError("boom"))
        delivery = FakeDelivery(envelope_body())
        worker = NotificationWorker(FakeTransport([]), handler, requeue_on_failure=True)

        await worker.process(delivery)

        assert delivery.acked is False
        assert delivery.requeued is True

    async def test_decode_error_is_surfaced_to_handler(self):
        handler = make_handler()
        delivery = FakeDelivery(b"{broken")
        worker = NotificationWorker(FakeTransport([]), handler)

        assert await worker.process(delivery) is False

        handler.handle_message.assert_not_awaited()
        handler.handle_decode_error.assert_awaited_once()
        assert isinstance(handler.handle_decode_error.await_args.args[0], DecodeError)
        assert delivery.acked is False

    async def test_undecodable_delivery_is_never_settled(self):
        """Malformed bodies are not requeued; they keep their prefetch slot."""
        delivery = FakeDelivery(b"\xff\xfe")
        worker = NotificationWorker(FakeTransport([]), make_handler(), requeue_on_failure=True)

        await worker.process(delivery)

        assert (delivery.acked, delivery.nacked) == (False, False)

    async def test_outcome_counter(self):
        def acked() -> float:
            return REGISTRY.get_sample_value(
                "notification_messages_consumed_total", {"outcome": "acked"}
            ) or 0.0

        before = acked()
        await NotificationWorker(FakeTransport([]), make_handler()).process(FakeDelivery(envelope_body()))

        assert acked() == before + 1


class TestRun:
    """Tests for the feeder/worker loop."""

    async def test_processes_every_delivery_and_survives_failures(self):
        calls: list[int] = []

        async def handle(envelope: NotificationEnvelope) -> None:
            calls.append(envelope.tenant_id)
            if envelope.tenant_id == 2:
                raise RuntimeError("store down")

        handler = make_handler(side_effect=handle)
        deliveries = [FakeDelivery(envelope_body(tenant_id=i)) for i in (1, 2, 3)]
        deliveries.insert(1, FakeDelivery(b"garbage"))
        worker = NotificationWorker(FakeTransport(deliveries), handler, capacity=1)

        await asyncio.wait_for(worker.run(), timeout=5)

        assert calls == [1, 2, 3]
        assert [d.acked for d in deliveries] == [True, False, False, True]
        assert worker.is_running is False

    async def test_concurrent_consumers(self):
        in_flight = 0
        peak = 0

        async def handle(envelope: NotificationEnvelope) -> None:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1

        deliveries = [FakeDelivery(envelope_body(tenant_id=i)) for i in range(1, 7)]
        worker = NotificationWorker(
            FakeTransport(deliveries),
            make_handler(side_effect=handle),
            capacity=4,
            consumers=3,
        )

        await asyncio.wait_for(worker.run(), timeout=5)

        assert all(d.acked for d in deliveries)
        assert peak > 1

    async def test_stop_cancels_idle_worker(self):
        class EndlessTransport:
            async def receive(self):
                await asyncio.Event().wait()
                yield  # pragma: no cover

        worker = NotificationWorker(EndlessTransport(), make_handler())
        await worker.start()
        assert worker.is_running is True

        await asyncio.wait_for(worker.stop(), timeout=5)

        assert worker.is_running is False

    @pytest.mark.parametrize(("capacity", "consumers"), [(0, 1), (1, 0)])
    def test_rejects_invalid_sizes(self, capacity, consumers):
        with pytest.raises(ValueError):
            NotificationWorker(FakeTransport([]), make_handler(), capacity=capacity, consumers=consumers)
