"""Theme preference endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from app.api.deps import STORE_DEP
from app.schemas.theme import ThemeResponse, ThemeUpdate
from app.services import theme as theme_service

if TYPE_CHECKING:
    from app.stores.base import EntityStore

router = APIRouter(prefix="/theme", tags=["theme"])


@router.get("", response_model=ThemeResponse)
async def get_theme(store: EntityStore = STORE_DEP) -> ThemeResponse:
    """Return the stored theme (`light` until changed)."""
    return ThemeResponse(theme=await theme_service.get_theme(store))


@router.patch("", response_model=ThemeResponse)
async def set_theme(payload: ThemeUpdate, store: EntityStore = STORE_DEP) -> ThemeResponse:
    return ThemeResponse(theme=await theme_service.set_theme(store, theme=payload.theme))


@router.post("/toggle", response_model=ThemeResponse)
async def toggle_theme(store: EntityStore = STORE_DEP) -> ThemeResponse:
    """Switch between light and dark."""
    return ThemeResponse(theme=await theme_service.toggle_theme(store))
