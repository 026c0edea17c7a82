"""
FastAPI dependencies shared by the routers.

Tests swap these out through ``app.dependency_overrides``.
"""
from typing import Optional

from toolkit.config import config
from toolkit.services.palette_store import PaletteStore
from toolkit.services.sessions import SessionRegistry
from toolkit.services.storage import JsonFileStore

_palette_store: Optional[PaletteStore] = None
_sessions = SessionRegistry(max_sessions=config.MAX_SESSIONS)


def get_palette_store() -> PaletteStore:
    """Palette store backed by the configured JSON file."""
    global _palette_store
    if _palette_store is None:
        _palette_store = PaletteStore(JsonFileStore(config.STORE_PATH), key=config.STORE_KEY)
    return _palette_store


def get_session_registry() -> SessionRegistry:
    return _sessions
