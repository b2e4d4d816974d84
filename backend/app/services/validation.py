"""Input rules for names, titles, colors and theme values.

Each validator returns the cleaned value (trimmed where text is involved) and
raises :class:`ValidationError` naming the offending field otherwise.
"""

from __future__ import annotations

import re
from typing import Final

from app.core.errors import ValidationError
from app.models.theme_preferences import THEME_OPTIONS

BOARD_NAME_MAX_LENGTH = 100
COLUMN_NAME_MAX_LENGTH = 50
TASK_TITLE_MAX_LENGTH = 200
TASK_DESCRIPTION_MAX_LENGTH = 5000
SUBTASK_TITLE_MAX_LENGTH = 200

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class _Unset:
    """Marker for "field not supplied" in partial updates."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


def _required_text(value: object, *, label: str, field: str, max_length: int) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{label} is required", field=field)
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"{label} cannot be empty", field=field)
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{label} must be {max_length} characters or less",
            field=field,
        )
    return cleaned


def validate_board_name(name: object) -> str:
    return _required_text(
        name,
        label="Board name",
        field="name",
        max_length=BOARD_NAME_MAX_LENGTH,
    )


def validate_column_name(name: object) -> str:
    return _required_text(
        name,
        label="Column name",
        field="name",
        max_length=COLUMN_NAME_MAX_LENGTH,
    )


def validate_task_title(title: object) -> str:
    return _required_text(
        title,
        label="Task title",
        field="title",
        max_length=TASK_TITLE_MAX_LENGTH,
    )


def validate_subtask_title(title: object) -> str:
    return _required_text(
        title,
        label="Subtask title",
        field="title",
        max_length=SUBTASK_TITLE_MAX_LENGTH,
    )


def validate_task_description(description: object) -> str | None:
    """Optional free text; blank input is stored as ``None``."""
    if description is None:
        return None
    if not isinstance(description, str):
        raise ValidationError("Task description must be text", field="description")
    if len(description) > TASK_DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Task description must be {TASK_DESCRIPTION_MAX_LENGTH} characters or less",
            field="description",
        )
    return description.strip() or None


def validate_color(color: object) -> str:
    if not isinstance(color, str) or not HEX_COLOR_PATTERN.fullmatch(color):
        raise ValidationError(
            "Color must be a valid hex color (e.g., #FF0000)",
            field="color",
        )
    return color


def validate_theme(theme: object) -> str:
    if theme not in THEME_OPTIONS:
        options = ", ".join(THEME_OPTIONS)
        raise ValidationError(f"Theme must be one of: {options}", field="theme")
    return str(theme)
