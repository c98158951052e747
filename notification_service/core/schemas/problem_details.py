"""RFC 7807 Problem Details schemas.

See: https://datatracker.ietf.org/doc/html/rfc7807
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_DEFAULT_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Example:
        return JSONResponse(
            status_code=404,
            content=ProblemDetail(
                type="setting-not-found",
                title="Not Found",
                status=404,
                detail="No notification setting found for event ID: 999",
                instance="/api/v1/settings/999",
            ).model_dump(exclude_none=True),
        )
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(
        min_length=1, max_length=200, description="Short, human-readable summary of the problem"
    )
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None,
        max_length=2000,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "invalid-page",
                "title": "Bad Request",
                "status": 400,
                "detail": "Invalid page: '0'. Must be a positive integer no greater than 2147483647.",
                "instance": "/api/v1/notifications?page=0",
            }
        },
    )

    @staticmethod
    def default_title(status_code: int) -> str:
        return _DEFAULT_TITLES.get(status_code, "Error")


class FieldError(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str
    type: str
    value: Any | None = None


class ValidationProblemDetail(ProblemDetail):
    """Problem detail carrying field-level validation errors."""

    errors: list[FieldError] = Field(default_factory=list)
