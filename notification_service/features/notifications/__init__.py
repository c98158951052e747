"""Notifications feature: mute settings, notification store and API."""

from __future__ import annotations

from notification_service.features.notifications.consumer import NotificationConsumer
from notification_service.features.notifications.mute_cache import MuteSettingCache
from notification_service.features.notifications.repository import NotificationStore
from notification_service.features.notifications.router import ROUTES, Route, build_router
from notification_service.features.notifications.service import (
    NotificationService,
    create_notification_service,
)

__all__ = [
    "ROUTES",
    "MuteSettingCache",
    "NotificationConsumer",
    "NotificationService",
    "NotificationStore",
    "Route",
    "build_router",
    "create_notification_service",
]
