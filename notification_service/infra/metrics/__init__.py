"""Metrics infrastructure for Prometheus monitoring."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from notification_service.infra.metrics.prometheus import (
    REGISTRY,
    consumed_messages_total,
    mute_cache_lookups_total,
    notifications_created_total,
    notifications_skipped_total,
)

__all__ = [
    "CONTENT_TYPE_LATEST",
    "REGISTRY",
    "consumed_messages_total",
    "generate_latest",
    "mute_cache_lookups_total",
    "notifications_created_total",
    "notifications_skipped_total",
]
