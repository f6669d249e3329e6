"""Tests for the HTTP API."""

import httpx
import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient

from provider_gateway.api.dependencies import get_encryption_service
from provider_gateway.database.database import get_db
from provider_gateway.main import app
from tests.conftest import mock_response


@pytest.fixture
def client(session_factory, encryption_service):
    """Test client wired to an in-memory database; startup events are not run."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_encryption_service] = lambda: encryption_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_provider(client, provider_name="openai", owner_id=1, **extra):
    payload = {"owner_id": owner_id, "provider_name": provider_name, "api_key": "sk-test-key-1234567890"}
    payload.update(extra)
    response = client.post("/api/ai-providers", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestProviderEndpoints:
    """Test provider CRUD endpoints."""

    def test_create_provider(self, client):
        data = _create_provider(client, "anthropic", region="eu")

        assert data["provider_name"] == "anthropic"
        assert data["display_name"] == "Anthropic"
        assert data["status"] == "configured"
        assert data["base_url"] == "https://api.anthropic.com"
        assert data["region"] == "eu"
        assert data["model_count"] == 0
        assert "api_key" not in data
        assert "api_key_encrypted" not in data
        assert "sk-test-key-1234567890" not in str(data)

    def test_create_unsupported_provider(self, client):
        response = client.post("/api/ai-providers", json={
            "owner_id": 1, "provider_name": "skynet", "api_key": "sk-test-key-1234567890"
        })
        assert response.status_code == 400

    def test_create_duplicate_provider(self, client):
        _create_provider(client, "openai")
        response = client.post("/api/ai-providers", json={
            "owner_id": 1, "provider_name": "openai", "api_key": "sk-test-key-0987654321"
        })
        assert response.status_code == 409

    def test_create_short_api_key(self, client):
        response = client.post("/api/ai-providers", json={
            "owner_id": 1, "provider_name": "openai", "api_key": "short"
        })
        assert response.status_code == 422

    def test_list_providers_by_owner(self, client):
        _create_provider(client, "openai", owner_id=1)
        _create_provider(client, "google", owner_id=2)

        assert len(client.get("/api/ai-providers").json()) == 2
        owner_one = client.get("/api/ai-providers", params={"owner_id": 1}).json()
        assert [p["provider_name"] for p in owner_one] == ["openai"]

    def test_get_missing_provider(self, client):
        assert client.get("/api/ai-providers/999").status_code == 404

    def test_update_provider(self, client):
        provider = _create_provider(client, "openai")

        response = client.put(f"/api/ai-providers/{provider['id']}", json={
            "base_url": "https://proxy.local/v1/"
        })

        assert response.status_code == 200
        assert response.json()["base_url"] == "https://proxy.local/v1"

    def test_delete_provider(self, client):
        provider = _create_provider(client, "openai")

        assert client.delete(f"/api/ai-providers/{provider['id']}").status_code == 204
        assert client.get(f"/api/ai-providers/{provider['id']}").status_code == 404
        assert client.delete(f"/api/ai-providers/{provider['id']}").status_code == 404


class TestConnectionAndSyncEndpoints:
    """Test connection testing and catalog sync endpoints."""

    def test_connection_success(self, client):
        provider = _create_provider(client, "openai")

        with patch('httpx.AsyncClient') as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.get = AsyncMock(return_value=mock_response(200, {"data": [{"id": "gpt-4"}]}))
            response = client.post(f"/api/ai-providers/{provider['id']}/test")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == "ready"
        assert client.get(f"/api/ai-providers/{provider['id']}").json()["status"] == "ready"

    def test_connection_failure_is_reported_in_body(self, client):
        provider = _create_provider(client, "openai")

        with patch('httpx.AsyncClient') as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.get = AsyncMock(side_effect=httpx.ConnectTimeout("timed out"))
            response = client.post(f"/api/ai-providers/{provider['id']}/test")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["status"] == "error"
        assert data["error"]
        assert data["error_kind"] == "network"

    def test_fetch_models(self, client):
        provider = _create_provider(client, "openai")

        with patch('httpx.AsyncClient') as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.get = AsyncMock(return_value=mock_response(200, {
                "data": [{"id": "gpt-4"}, {"id": "gpt-3.5-turbo"}]
            }))
            response = client.post(f"/api/ai-providers/{provider['id']}/fetch-models")

        assert response.status_code == 200
        data = response.json()
        assert data["models_fetched"] == 2
        assert {m["model_id"] for m in data["models"]} == {"gpt-4", "gpt-3.5-turbo"}
        assert data["models"][0]["full_identifier"].startswith("openai:")

        models = client.get(f"/api/ai-providers/{provider['id']}/models").json()
        assert len(models) == 2
        assert client.get(f"/api/ai-providers/{provider['id']}").json()["model_count"] == 2

    def test_fetch_models_rejected_key(self, client):
        provider = _create_provider(client, "google")

        with patch('httpx.AsyncClient') as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.get = AsyncMock(return_value=mock_response(401, {"error": {"message": "bad key"}}))
            response = client.post(f"/api/ai-providers/{provider['id']}/fetch-models")

        assert response.status_code == 502
        assert "google" in response.json()["detail"]

    def test_fetch_models_missing_provider(self, client):
        assert client.post("/api/ai-providers/999/fetch-models").status_code == 404


class TestModelEndpoints:
    """Test model flag and chat endpoints."""

    @pytest.fixture
    def synced_provider(self, client):
        provider = _create_provider(client, "anthropic")
        client.post(f"/api/ai-providers/{provider['id']}/fetch-models")
        return provider

    def _models(self, client, provider):
        return client.get(f"/api/ai-providers/{provider['id']}/models").json()

    def test_update_flags_and_default(self, client, synced_provider):
        first, second = self._models(client, synced_provider)[:2]

        response = client.put(f"/api/ai-models/{first['id']}", json={"is_default": True, "is_active": True})
        assert response.status_code == 200
        assert response.json()["is_default"] is True

        client.put(f"/api/ai-models/{second['id']}", json={"is_default": True})

        defaults = [m for m in self._models(client, synced_provider) if m["is_default"]]
        assert [m["id"] for m in defaults] == [second["id"]]

    def test_update_missing_model(self, client):
        assert client.put("/api/ai-models/999", json={"is_active": True}).status_code == 404

    def test_active_models(self, client, synced_provider):
        model = self._models(client, synced_provider)[0]
        client.put(f"/api/ai-models/{model['id']}", json={"is_active": True})

        # Provider has not passed a connection test yet
        assert client.get("/api/ai-models/active", params={"owner_id": 1}).json() == []

        with patch('httpx.AsyncClient') as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.post = AsyncMock(return_value=mock_response(200, {"model": "claude-3-haiku-20240307"}))
            client.post(f"/api/ai-providers/{synced_provider['id']}/test")

        active = client.get("/api/ai-models/active", params={"owner_id": 1}).json()
        assert [m["id"] for m in active] == [model["id"]]
        assert active[0]["provider"]["name"] == "anthropic"

    def test_chat(self, client, synced_provider):
        model = self._models(client, synced_provider)[0]
        body = {"content": [{"type": "text", "text": "Hello!"}]}

        with patch('httpx.AsyncClient') as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.post = AsyncMock(return_value=mock_response(200, body))
            response = client.post(f"/api/ai-models/{model['id']}/chat", json={
                "messages": [{"role": "user", "content": "Hi"}],
                "max_tokens": 100,
            })

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == body
        assert data["model_used"] == model["model_id"]
        assert data["provider"] == "anthropic"
        assert data["response_time_ms"] >= 0

    def test_chat_empty_messages(self, client, synced_provider):
        model = self._models(client, synced_provider)[0]

        with patch('httpx.AsyncClient') as mock_client:
            response = client.post(f"/api/ai-models/{model['id']}/chat", json={"messages": []})
            mock_client.assert_not_called()

        assert response.status_code == 422

    def test_chat_out_of_range_max_tokens(self, client, synced_provider):
        model = self._models(client, synced_provider)[0]

        response = client.post(f"/api/ai-models/{model['id']}/chat", json={
            "messages": [{"role": "user", "content": "Hi"}],
            "max_tokens": 5000,
        })

        assert response.status_code == 422

    def test_chat_rate_limited(self, client, synced_provider):
        model = self._models(client, synced_provider)[0]

        with patch('httpx.AsyncClient') as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.post = AsyncMock(return_value=mock_response(429, {"error": {"message": "rate limited"}}))
            response = client.post(f"/api/ai-models/{model['id']}/chat", json={
                "messages": [{"role": "user", "content": "Hi"}],
            })

        assert response.status_code == 429

    def test_chat_missing_model(self, client):
        response = client.post("/api/ai-models/999/chat", json={
            "messages": [{"role": "user", "content": "Hi"}],
        })
        assert response.status_code == 404


class TestStatusEndpoints:
    """Test health, stats and vendor listing."""

    def test_root(self, client):
        assert client.get("/").json()["message"] == "AI Provider Gateway API"

    def test_stats(self, client):
        _create_provider(client, "openai")

        data = client.get("/api/stats").json()
        assert data["providers_count"] == 1
        assert data["ready_providers_count"] == 0
        assert data["models_count"] == 0

    def test_supported_providers(self, client):
        data = client.get("/api/supported-providers").json()

        assert len(data) == 12
        implemented = {p["name"] for p in data if p["implemented"]}
        assert implemented == {"openai", "google", "anthropic"}
