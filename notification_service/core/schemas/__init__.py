"""Shared API schemas."""

from __future__ import annotations

from notification_service.core.schemas.problem_details import (
    FieldError,
    ProblemDetail,
    ValidationProblemDetail,
)

__all__ = ["FieldError", "ProblemDetail", "ValidationProblemDetail"]
