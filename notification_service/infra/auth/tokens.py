"""Bearer token decoding with PyJWT."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jwt

from notification_service.core.exceptions import UnauthorizedException

if TYPE_CHECKING:
    from notification_service.core.settings.auth import AuthSettings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class TokenDecoder:
    """Resolve a signed bearer token to the tenant it was issued for."""

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    def decode_tenant_id(self, token: str | None) -> int:
        """Verify ``token`` and return its tenant claim.

        Raises:
            UnauthorizedException: If the token is missing, fails verification,
                or does not carry a usable tenant claim.
        """
        if not token:
            raise UnauthorizedException("Missing bearer token")

        try:
            claims = jwt.decode(
                token,
                self._settings.jwt_secret.get_secret_value(),
                algorithms=[self._settings.jwt_algorithm],
                options={"verify_exp": self._settings.verify_expiration},
            )
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected bearer token", extra={"reason": type(exc).__name__})
            raise UnauthorizedException("Invalid bearer token") from exc

        tenant_id = claims.get(self._settings.tenant_claim)
        # bool is an int subclass; a True claim is not a tenant
        if isinstance(tenant_id, bool) or tenant_id is None:
            raise UnauthorizedException("Token does not carry a tenant")
        if isinstance(tenant_id, str) and tenant_id.isdigit():
            tenant_id = int(tenant_id)
        if not isinstance(tenant_id, int) or tenant_id <= 0:
            raise UnauthorizedException("Token does not carry a tenant")
        return tenant_id


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token part of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None
