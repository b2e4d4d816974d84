"""Shared storage-backend enum values."""

from __future__ import annotations

from enum import Enum


class StorageBackend(str, Enum):
    """Supported entity store adapters."""

    SQL = "sql"
    JSON = "json"
