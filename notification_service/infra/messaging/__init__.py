"""Messaging infrastructure: RabbitMQ transport, envelope schema and worker."""

from __future__ import annotations

from notification_service.infra.messaging.events import NotificationEnvelope, decode_envelope
from notification_service.infra.messaging.exceptions import (
    DecodeError,
    MessagingError,
    TransportError,
)
from notification_service.infra.messaging.transport import InboundMessage, NotificationTransport
from notification_service.infra.messaging.worker import EnvelopeHandler, NotificationWorker

__all__ = [
    "DecodeError",
    "EnvelopeHandler",
    "InboundMessage",
    "MessagingError",
    "NotificationEnvelope",
    "NotificationTransport",
    "NotificationWorker",
    "TransportError",
    "decode_envelope",
]
