"""Messaging-layer errors.

These never reach HTTP callers; they decide whether a delivery is
acknowledged.
"""

from __future__ import annotations


class MessagingError(Exception):
    """Base class for broker and envelope failures."""


class TransportError(MessagingError):
    """Broker endpoint unreachable or the session failed."""


class DecodeError(MessagingError):
    """Message body is not a valid notification envelope.

    Attributes:
        body: The raw payload that failed to decode.
    """

    def __init__(self, message: str, body: bytes | None = None) -> None:
        super().__init__(message)
        self.body = body
