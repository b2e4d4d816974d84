"""Structured error payload schemas used by API responses."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel
from sqlmodel._compat import SQLModelConfig


class ErrorDetail(SQLModel):
    """Machine-readable description of one failure."""

    code: str = Field(
        description="Stable error code.",
        examples=["VALIDATION_ERROR", "NOT_FOUND", "BUSINESS_RULE_ERROR", "STORAGE_ERROR"],
    )
    message: str = Field(
        description="Human-readable explanation suitable for display.",
        examples=["Board name must be 100 characters or less"],
    )
    field: str | None = Field(
        default=None,
        description="Offending input field, for validation failures.",
        examples=["name"],
    )
    details: list[object] | None = Field(
        default=None,
        description="Raw request validation errors, when available.",
    )


class ErrorResponse(SQLModel):
    """Envelope for every non-2xx API response."""

    model_config = SQLModelConfig(
        json_schema_extra={
            "title": "ErrorResponse",
            "example": {
                "error": {"code": "NOT_FOUND", "message": "Board with id 42 not found"},
                "request_id": "0b9f4a7c2d8e4e0f9a1b2c3d4e5f6a7b",
            },
        },
    )

    error: ErrorDetail
    request_id: str | None = Field(
        default=None,
        description="Request correlation identifier injected by middleware.",
    )
