"""Schemas for the UI theme preference."""

from __future__ import annotations

from pydantic import Field

from app.schemas.common import ApiModel


class ThemeUpdate(ApiModel):
    theme: str = Field(examples=["dark"])


class ThemeResponse(ApiModel):
    theme: str = Field(examples=["light"])
