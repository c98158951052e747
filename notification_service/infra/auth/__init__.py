"""Bearer token handling."""

from __future__ import annotations

from notification_service.infra.auth.tokens import TokenDecoder, extract_bearer_token

__all__ = ["TokenDecoder", "extract_bearer_token"]
