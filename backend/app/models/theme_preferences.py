"""Singleton theme preference row."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.core.time import utcnow

RUNTIME_ANNOTATION_TYPES = (datetime,)
THEME_PREFERENCE_ID = "default"
DEFAULT_THEME = "light"
THEME_OPTIONS = ("light", "dark")


class ThemePreference(SQLModel, table=True):
    """UI theme choice; exactly one row with id `default` exists once read."""

    __tablename__ = "theme_preferences"  # pyright: ignore[reportAssignmentType]

    id: str = Field(default=THEME_PREFERENCE_ID, primary_key=True)
    theme: str = Field(default=DEFAULT_THEME)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
