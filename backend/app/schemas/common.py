"""Base schema and small shared payloads for the public API."""

from __future__ import annotations

from pydantic import Field
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel
from sqlmodel._compat import SQLModelConfig


class ApiModel(SQLModel):
    """API payload base: camelCase on the wire, snake_case accepted on input."""

    model_config = SQLModelConfig(
        alias_generator=to_camel,
        validate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(ApiModel):
    """Acknowledgement returned by delete endpoints."""

    success: bool = Field(default=True, examples=[True])
