"""Tenant-scoped notification service driven by broker events."""

__version__ = "0.1.0"
