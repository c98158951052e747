"""FastAPI dependencies for the notifications API.

Services are created once in the application lifespan and stored on
``app.state``; these dependencies hand them to route handlers.

Example:
    @router.get("/notifications")
    async def list_notifications(
        tenant_id: CurrentTenantDep,
        service: NotificationServiceDep,
    ):
        return await service.get_notifications(tenant_id)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Request

from notification_service.core.exceptions import UnauthorizedException
from notification_service.features.notifications.service import NotificationService
from notification_service.infra.auth import TokenDecoder, extract_bearer_token
from notification_service.infra.logging import set_log_context


def get_notification_service(request: Request) -> NotificationService:
    service: NotificationService | None = getattr(request.app.state, "notification_service", None)
    if service is None:
        msg = "Notification service not initialized"
        raise RuntimeError(msg)
    return service


def get_token_decoder(request: Request) -> TokenDecoder:
    decoder: TokenDecoder | None = getattr(request.app.state, "token_decoder", None)
    if decoder is None:
        msg = "Token decoder not initialized"
        raise RuntimeError(msg)
    return decoder


async def authenticate_tenant(
    request: Request,
    decoder: Annotated[TokenDecoder, Depends(get_token_decoder)],
    authorization: Annotated[str | None, Header()] = None,
) -> int:
    """Resolve the bearer token to a tenant and bind it to the request.

    Attached to every non-public route by the route table.

    Raises:
        UnauthorizedException: If the token is missing, invalid, or carries
            no tenant claim.
    """
    tenant_id = decoder.decode_tenant_id(extract_bearer_token(authorization))
    request.state.tenant_id = tenant_id
    set_log_context(tenant_id=tenant_id)
    return tenant_id


def get_current_tenant(request: Request) -> int:
    """Tenant bound by :func:`authenticate_tenant`."""
    tenant_id: int | None = getattr(request.state, "tenant_id", None)
    if tenant_id is None:
        raise UnauthorizedException("Missing bearer token")
    return tenant_id


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
CurrentTenantDep = Annotated[int, Depends(get_current_tenant)]
