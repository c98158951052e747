"""Shared service-layer building blocks."""

from __future__ import annotations

from notification_service.core.services.base import BaseService

__all__ = ["BaseService"]
