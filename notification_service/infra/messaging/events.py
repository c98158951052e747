"""Wire schema for notification events exchanged over the broker.

The body is UTF-8 JSON:

    {"tenantId": 1, "eventId": 2, "message": "hi"}
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from notification_service.infra.messaging.exceptions import DecodeError


class NotificationEnvelope(BaseModel):
    """Inbound notification event.

    Example:
        envelope = NotificationEnvelope(tenant_id=1, event_id=2, message="hi")
        await transport.publish(envelope)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tenant_id: StrictInt = Field(alias="tenantId", description="Tenant receiving the notification")
    event_id: StrictInt = Field(alias="eventId", description="Event type that produced it")
    message: StrictStr = Field(description="Notification text")

    def to_wire(self) -> bytes:
        """Serialize using the camelCase wire field names."""
        return self.model_dump_json(by_alias=True).encode("utf-8")


def decode_envelope(body: bytes | str) -> NotificationEnvelope:
    """Parse a raw message body into a :class:`NotificationEnvelope`.

    Raises:
        DecodeError: If the body is not UTF-8 JSON with the expected fields
            and types.
    """
    raw = body.encode("utf-8") if isinstance(body, str) else body
    try:
        return NotificationEnvelope.model_validate_json(raw)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        raise DecodeError(f"Malformed notification envelope: {errors}", body=raw) from exc
    except UnicodeDecodeError as exc:
        raise DecodeError("Notification envelope is not valid UTF-8", body=raw) from exc
