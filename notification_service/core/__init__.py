"""Core building blocks: settings, exceptions, database base classes."""
