# ruff: noqa: INP001
"""Boundary tests for field validators."""

from __future__ import annotations

import pytest

from app.core.errors import ValidationError
from app.services.validation import (
    validate_board_name,
    validate_color,
    validate_column_name,
    validate_subtask_title,
    validate_task_description,
    validate_task_title,
    validate_theme,
)


def test_board_name_limits() -> None:
    assert validate_board_name("b" * 100) == "b" * 100
    assert validate_board_name("  padded  ") == "padded"
    with pytest.raises(ValidationError, match="100 characters or less"):
        validate_board_name("b" * 101)


def test_missing_and_blank_names_have_distinct_messages() -> None:
    with pytest.raises(ValidationError) as missing:
        validate_board_name("")
    assert missing.value.message == "Board name is required"
    assert missing.value.field == "name"

    with pytest.raises(ValidationError) as blank:
        validate_column_name("   ")
    assert blank.value.message == "Column name cannot be empty"

    with pytest.raises(ValidationError, match="is required"):
        validate_task_title(None)


def test_column_name_limit() -> None:
    assert validate_column_name("c" * 50) == "c" * 50
    with pytest.raises(ValidationError):
        validate_column_name("c" * 51)


def test_title_limits() -> None:
    assert validate_task_title("t" * 200) == "t" * 200
    assert validate_subtask_title("s" * 200) == "s" * 200
    with pytest.raises(ValidationError) as exc:
        validate_task_title("t" * 201)
    assert exc.value.field == "title"
    with pytest.raises(ValidationError):
        validate_subtask_title("s" * 201)


def test_description_limit_and_blank_normalisation() -> None:
    assert validate_task_description("d" * 5000) == "d" * 5000
    assert validate_task_description(None) is None
    assert validate_task_description("  ") is None
    assert validate_task_description(" text ") == "text"
    with pytest.raises(ValidationError) as exc:
        validate_task_description("d" * 5001)
    assert exc.value.field == "description"


@pytest.mark.parametrize("color", ["#635FC7", "#000000", "#abcdef"])
def test_valid_colors(color: str) -> None:
    assert validate_color(color) == color


@pytest.mark.parametrize("color", ["#12345", "purple", "635FC7", "#1234567", "#GGGGGG", None])
def test_invalid_colors(color: object) -> None:
    with pytest.raises(ValidationError) as exc:
        validate_color(color)
    assert exc.value.field == "color"


def test_theme_options() -> None:
    assert validate_theme("light") == "light"
    assert validate_theme("dark") == "dark"
    with pytest.raises(ValidationError, match="light, dark"):
        validate_theme("Dark")
