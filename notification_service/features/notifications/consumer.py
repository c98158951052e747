"""Queue-facing handler that feeds decoded envelopes to the orchestrator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notification_service.features.notifications.service import NotificationService
    from notification_service.infra.messaging import DecodeError, NotificationEnvelope
    from notification_service.infra.observability import Observability

logger = logging.getLogger(__name__)


class NotificationConsumer:
    """Envelope handler plugged into :class:`NotificationWorker`."""

    def __init__(self, service: NotificationService, observability: Observability) -> None:
        self._service = service
        self._observability = observability

    async def handle_message(self, envelope: NotificationEnvelope) -> None:
        # Raising leaves the delivery un-acked
        await self._service.create_notification(
            envelope.event_id,
            envelope.tenant_id,
            envelope.message,
        )

    async def handle_decode_error(self, error: DecodeError) -> None:
        self._observability.add_breadcrumb("Malformed notification message received")
        self._observability.record_error(error, operation="decode_envelope")
