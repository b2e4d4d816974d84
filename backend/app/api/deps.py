"""Reusable FastAPI dependencies shared by the API routers.

Routers receive an :class:`EntityStore` and hand it to the services; they never
open sessions or files themselves, so the storage backend stays a deployment
setting (``STORAGE_BACKEND``) rather than a routing concern.
"""

from __future__ import annotations

from fastapi import Depends

from app.db.session import get_store

STORE_DEP = Depends(get_store)
