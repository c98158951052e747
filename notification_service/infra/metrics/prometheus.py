"""Prometheus metrics for the notification pipeline."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter

# Custom registry keeps test runs and multiple app instances isolated from
# the global default collectors
REGISTRY = CollectorRegistry()

# Write path
notifications_created_total = Counter(
    "notifications_created_total",
    "Notifications persisted for an unmuted event",
    registry=REGISTRY,
)

notifications_skipped_total = Counter(
    "notifications_skipped_total",
    "Inbound notifications dropped because the event is muted",
    registry=REGISTRY,
)

# Mute-setting cache
mute_cache_lookups_total = Counter(
    "mute_cache_lookups_total",
    "Mute-setting cache lookups",
    ["result"],  # hit, miss
    registry=REGISTRY,
)

# Broker consumption
consumed_messages_total = Counter(
    "notification_messages_consumed_total",
    "Notification queue deliveries by processing outcome",
    ["outcome"],  # acked, failed, decode_error
    registry=REGISTRY,
)
