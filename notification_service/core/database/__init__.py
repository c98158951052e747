"""Declarative base and mixins for SQLAlchemy models."""

from __future__ import annotations

from notification_service.core.database.base import Base, IntegerPKMixin, TimestampMixin

__all__ = ["Base", "IntegerPKMixin", "TimestampMixin"]
