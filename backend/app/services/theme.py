"""Theme preference: a single persisted ``light``/``dark`` choice."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.logging import get_logger
from app.core.time import utcnow
from app.models.theme_preferences import DEFAULT_THEME, THEME_PREFERENCE_ID, ThemePreference
from app.services.validation import validate_theme

if TYPE_CHECKING:
    from app.stores.base import EntityStore

logger = get_logger(__name__)


async def _load_or_create(store: EntityStore) -> ThemePreference:
    preference = await store.get(ThemePreference, THEME_PREFERENCE_ID)
    if preference is None:
        preference = await store.insert(
            ThemePreference(id=THEME_PREFERENCE_ID, theme=DEFAULT_THEME, updated_at=utcnow()),
        )
    return preference


async def get_theme(store: EntityStore) -> str:
    """Return the stored theme, creating the default row on first read."""
    async with store.transaction():
        preference = await _load_or_create(store)
    return preference.theme


async def set_theme(store: EntityStore, *, theme: str) -> str:
    clean_theme = validate_theme(theme)
    async with store.transaction():
        await _load_or_create(store)
        await store.update(
            ThemePreference,
            THEME_PREFERENCE_ID,
            {"theme": clean_theme, "updated_at": utcnow()},
        )
    logger.info("theme.updated", extra={"theme": clean_theme})
    return clean_theme


async def toggle_theme(store: EntityStore) -> str:
    """Switch between light and dark."""
    async with store.transaction():
        current = (await _load_or_create(store)).theme
        theme = "dark" if current == "light" else "light"
        await store.update(
            ThemePreference,
            THEME_PREFERENCE_ID,
            {"theme": theme, "updated_at": utcnow()},
        )
    logger.info("theme.updated", extra={"theme": theme})
    return theme
