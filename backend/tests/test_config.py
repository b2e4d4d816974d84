# ruff: noqa: INP001
"""Settings validation and logging formatter tests."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.core.logging import JsonFormatter, TextFormatter
from app.core.storage_backend import StorageBackend


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # conftest exports test values; these cases build Settings from arguments only.
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)


def test_log_format_is_normalised() -> None:
    settings = Settings(_env_file=None, log_format="  JSON ")

    assert settings.log_format == "json"


def test_unknown_log_format_is_rejected() -> None:
    with pytest.raises(ValidationError, match="LOG_FORMAT must be one of: json, text."):
        Settings(_env_file=None, log_format="xml")


def test_json_backend_requires_store_path() -> None:
    with pytest.raises(
        ValidationError,
        match="JSON_STORE_PATH must be set and non-empty when STORAGE_BACKEND=json.",
    ):
        Settings(_env_file=None, storage_backend=StorageBackend.JSON, json_store_path="  ")


def test_storage_backend_parses_plain_strings() -> None:
    settings = Settings(_env_file=None, storage_backend="json", json_store_path="board.json")

    assert settings.storage_backend is StorageBackend.JSON


def test_unknown_storage_backend_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, storage_backend="redis")


def test_dev_defaults_to_auto_migrate() -> None:
    assert Settings(_env_file=None, environment="dev").db_auto_migrate is True
    assert Settings(_env_file=None, environment="prod").db_auto_migrate is False


def test_explicit_auto_migrate_wins_in_dev() -> None:
    settings = Settings(_env_file=None, environment="dev", db_auto_migrate=False)

    assert settings.db_auto_migrate is False


def test_auto_migrate_from_environment_wins_in_dev(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_AUTO_MIGRATE", "false")

    assert Settings(_env_file=None, environment="dev").db_auto_migrate is False


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        "app.services.tasks",
        logging.INFO,
        __file__,
        1,
        "task.moved",
        None,
        None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras() -> None:
    payload = json.loads(JsonFormatter().format(_record(task_id="t-1", position=2)))

    assert payload["message"] == "task.moved"
    assert payload["logger"] == "app.services.tasks"
    assert payload["task_id"] == "t-1"
    assert payload["position"] == 2


def test_text_formatter_appends_sorted_extras() -> None:
    line = TextFormatter("%(levelname)s %(message)s").format(_record(b=2, a=1))

    assert line == "INFO task.moved a=1 b=2"
