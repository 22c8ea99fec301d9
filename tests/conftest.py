import os
from pathlib import Path

# Must be set before importing app: the static mount and default store path
# are read at import time.
os.environ.setdefault("STATIC_DIR", str(Path(__file__).parent / "static"))
os.environ.setdefault("RECIPES_FILE", str(Path(__file__).parent / "unused.json"))

import pytest
from fastapi.testclient import TestClient

from app import app, get_store
from store import RecipeStore


@pytest.fixture
def store(tmp_path):
    """A store backed by a fresh file under tmp_path. The file starts out missing."""
    return RecipeStore(tmp_path / "info.json")


@pytest.fixture
def client(store):
    """
    A TestClient whose get_store dependency is overridden to use the per-test
    store, so no test touches the configured recipes file.
    """
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app, raise_server_exceptions=True)
    app.dependency_overrides.clear()


@pytest.fixture
def soup(client):
    """A recipe that already exists."""
    r = client.post("/api/recipes", json={"id": "r1", "name": "Soup"})
    assert r.status_code == 201
    return r.json()
