"""
Test configuration and fixtures for the ToolKit color tools.
"""
import pytest
from fastapi.testclient import TestClient

from main import app
from toolkit.api.deps import get_palette_store, get_session_registry
from toolkit.services.palette_store import PaletteStore
from toolkit.services.sessions import SessionRegistry
from toolkit.services.storage import InMemoryStore
from toolkit.utils.metrics import reset_metrics


@pytest.fixture
def memory_store():
    return PaletteStore(InMemoryStore())


@pytest.fixture
def session_registry():
    return SessionRegistry()


@pytest.fixture
def test_client(memory_store, session_registry):
    """Test client with in-memory palette storage and fresh sessions."""
    app.dependency_overrides[get_palette_store] = lambda: memory_store
    app.dependency_overrides[get_session_registry] = lambda: session_registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clean_metrics():
    """Reset metrics before each test."""
    reset_metrics()
