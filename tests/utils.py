"""Test doubles shared across the suite."""

from __future__ import annotations

import json
from typing import Any

# Seeded by the session_factory fixture: events 1 and 3 are muted, event 2 is
# not, and event 999 has no mute setting.
MUTED_EVENT = 1
UNMUTED_EVENT = 2
OTHER_MUTED_EVENT = 3
MISSING_EVENT = 999


class InMemoryCache:
    """Dict-backed stand-in for RedisCache (get/set with optional ttl)."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int | None] = {}
        self.get_calls = 0
        self.set_calls = 0
        self.fail_on_set = False

    async def get(self, key: str) -> Any | None:
        self.get_calls += 1
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        self.set_calls += 1
        if self.fail_on_set:
            raise ConnectionError("cache unavailable")
        self.data[key] = value
        self.ttls[key] = ttl
        return True


class RecordingObservability:
    """Observability double that keeps every error and breadcrumb."""

    def __init__(self) -> None:
        self.errors: list[tuple[BaseException, dict[str, Any]]] = []
        self.breadcrumbs: list[tuple[str, dict[str, Any]]] = []

    def record_error(self, exc: BaseException, **context: Any) -> None:
        self.errors.append((exc, context))

    def add_breadcrumb(self, message: str, **data: Any) -> None:
        self.breadcrumbs.append((message, data))

    @property
    def breadcrumb_messages(self) -> list[str]:
        return [message for message, _ in self.breadcrumbs]


class FakeDelivery:
    """Broker delivery that records how it was settled."""

    def __init__(self, body: bytes) -> None:
        self.body = body
        self.acked = False
        self.nacked = False
        self.requeued: bool | None = None

    async def ack(self) -> None:
        self.acked = True

    async def nack(self, requeue: bool = True) -> None:
        self.nacked = True
        self.requeued = requeue


class FakeTransport:
    """Transport that hands out a fixed list of deliveries, then stops."""

    def __init__(self, deliveries: list[FakeDelivery]) -> None:
        self.deliveries = deliveries

    async def receive(self):
        for delivery in self.deliveries:
            yield delivery


def envelope_body(tenant_id: Any = 1, event_id: Any = 2, message: Any = "hi") -> bytes:
    return json.dumps({"tenantId": tenant_id, "eventId": event_id, "message": message}).encode()
