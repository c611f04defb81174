import pytest
from fastapi.testclient import TestClient

from backend.voicechef.api.deps import get_catalog, get_favorites
from backend.voicechef.core.config import get_settings
from backend.voicechef.main import app
from backend.voicechef.services.favorites import FavoritesStore
from backend.voicechef.services.recipe_catalog import RecipeCatalog


@pytest.fixture
def client(tmp_path, monkeypatch, eggs, toast):
    # keep timer ticks out of the message stream
    monkeypatch.setattr(get_settings(), "tick_interval_seconds", 3600)
    catalog = RecipeCatalog([eggs, toast])
    favorites = FavoritesStore(str(tmp_path / "favorites.json"))
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_favorites] = lambda: favorites
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_recipes(client):
    assert [r["id"] for r in client.get("/api/recipes").json()] == ["eggs", "toast"]
    assert client.get("/api/recipes/eggs").json()["title"] == "Soft Boiled Eggs"
    assert client.get("/api/recipes/missing").status_code == 404
    assert [r["id"] for r in client.get("/api/recipes/search", params={"q": "bread"}).json()] == ["toast"]


def test_parse_makes_recipe_loadable(client):
    response = client.post("/api/recipes/parse", json={"content": "Tea\n1. Boil water.\n2. Steep for 3 minutes."})
    assert response.status_code == 200
    recipe = response.json()
    assert recipe["steps"][1]["duration_seconds"] == 180

    assert client.get(f"/api/recipes/{recipe['id']}").status_code == 200
    assert client.post("/api/recipes/parse", json={"content": ""}).status_code == 422


def test_favorites(client):
    assert client.get("/api/favorites").json() == []

    response = client.post("/api/favorites/eggs/toggle")
    assert response.json() == {"recipe_id": "eggs", "favorited": True}
    assert [r["id"] for r in client.get("/api/favorites").json()] == ["eggs"]

    assert client.post("/api/favorites/eggs/toggle").json()["favorited"] is False
    assert client.post("/api/favorites/missing/toggle").status_code == 404


def test_session_websocket(client):
    with client.websocket_connect("/api/v1/ws") as ws:
        ws.send_json({"type": "load", "recipe_id": "eggs"})
        assert ws.receive_json() == {"type": "tts", "utterance_id": 1, "text": "Bring water to a boil."}
        state = ws.receive_json()
        assert state["type"] == "state"
        assert state["state"]["step_index"] == 0
        assert state["state"]["total_steps"] == 4

        ws.send_json({"type": "transcript", "text": "banana"})
        state = ws.receive_json()
        assert state["state"]["recognized"] is False
        assert state["state"]["step_index"] == 0

        ws.send_json({"type": "navigate", "direction": "next"})
        assert ws.receive_json() == {"type": "tts_cancel", "utterance_id": 1}
        assert ws.receive_json()["text"] == "Lower the eggs in."
        state = ws.receive_json()["state"]
        assert state["step_index"] == 1
        assert state["narration"] == {"active": True, "text": "Lower the eggs in."}

        ws.send_json({"type": "transcript", "text": "what do I need"})
        assert ws.receive_json() == {"type": "ingredients", "ingredients": ["2 eggs", "water", "salt"]}
        assert ws.receive_json()["type"] == "state"

        ws.send_json({"type": "bogus"})
        assert ws.receive_json()["type"] == "error"


def test_session_websocket_falls_back(client):
    with client.websocket_connect("/api/v1/ws") as ws:
        ws.send_json({"type": "load", "recipe_id": "missing"})
        assert ws.receive_json()["text"] == "Soak rajma overnight and boil until tender."
        state = ws.receive_json()["state"]
        assert state["recipe"]["id"] == "rajma-chawal"
        assert state["fallback"] is True
        assert state["timer"] == {"remaining_seconds": 1800, "running": True}


def test_session_websocket_with_corrupt_favorites(tmp_path, monkeypatch, eggs, toast):
    monkeypatch.setattr(get_settings(), "tick_interval_seconds", 3600)
    path = tmp_path / "favorites.json"
    path.write_text("{not json")
    favorites = FavoritesStore(str(path))
    app.dependency_overrides[get_catalog] = lambda: RecipeCatalog([eggs, toast])
    app.dependency_overrides[get_favorites] = lambda: favorites
    try:
        client = TestClient(app)
        assert client.get("/api/favorites").json() == []
        with client.websocket_connect("/api/v1/ws") as ws:
            ws.send_json({"type": "load", "recipe_id": "eggs"})
            assert ws.receive_json()["type"] == "tts"
            state = ws.receive_json()["state"]
            assert state["recipe"]["id"] == "eggs"
            assert state["favorited"] is False
    finally:
        app.dependency_overrides.clear()
