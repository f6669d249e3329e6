"""Tests for the OpenAI adapter."""

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from provider_gateway.providers.base import ChatOptions
from provider_gateway.providers.credentials import Credential
from provider_gateway.providers.errors import (
    AuthenticationError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
)
from provider_gateway.providers.openai import OpenAIAdapter
from tests.conftest import mock_response

BASE_URL = "https://api.openai.com/v1"


@pytest.fixture
def adapter():
    return OpenAIAdapter()


@pytest.fixture
def credential():
    return Credential("sk-test-openai-key-123456")


class TestTestConnection:
    """Test the connection probe."""

    @pytest.mark.asyncio
    async def test_success(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.get = AsyncMock(return_value=mock_response(200, {
                "data": [{"id": "gpt-4"}, {"id": "gpt-3.5-turbo"}]
            }))

            result = await adapter.test_connection(credential, BASE_URL)

            assert result == {"models_count": 2}
            url = client.get.call_args[0][0]
            headers = client.get.call_args[1]["headers"]
            assert url == f"{BASE_URL}/models"
            assert headers["Authorization"] == "Bearer sk-test-openai-key-123456"

    @pytest.mark.asyncio
    async def test_invalid_key(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.get = AsyncMock(return_value=mock_response(401, {
                "error": {"message": "Incorrect API key provided"}
            }))

            with pytest.raises(AuthenticationError):
                await adapter.test_connection(credential, BASE_URL)

    @pytest.mark.asyncio
    async def test_data_not_a_list(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.get = AsyncMock(return_value=mock_response(200, {"data": 5}))

            with pytest.raises(MalformedResponseError):
                await adapter.test_connection(credential, BASE_URL)

    @pytest.mark.asyncio
    async def test_timeout(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.get = AsyncMock(side_effect=httpx.ConnectTimeout("timed out"))

            with pytest.raises(NetworkError) as exc_info:
                await adapter.test_connection(credential, BASE_URL)

            assert exc_info.value.provider == "openai"


class TestListModels:
    """Test catalog normalization."""

    @pytest.mark.asyncio
    async def test_normalizes_entries(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.get = AsyncMock(return_value=mock_response(200, {
                "object": "list",
                "data": [
                    {"id": "gpt-4-turbo", "object": "model", "owned_by": "openai"},
                    {"id": "gpt-3.5-turbo", "object": "model", "owned_by": "openai"},
                ]
            }))

            models = await adapter.list_models(credential, BASE_URL)

        assert [m.model_id for m in models] == ["gpt-4-turbo", "gpt-3.5-turbo"]
        turbo = models[0]
        assert turbo.name == "Gpt 4 Turbo"
        assert turbo.family == "gpt-4"
        assert turbo.context_window == 128000
        assert turbo.input_cost == 0.01
        assert turbo.output_cost == 0.03
        assert "reasoning" in turbo.capabilities
        assert models[1].capabilities == ["text", "code"]
        assert models[1].context_window == 16385

    @pytest.mark.asyncio
    async def test_missing_data(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.get = AsyncMock(return_value=mock_response(200, {"object": "list"}))

            with pytest.raises(MalformedResponseError):
                await adapter.list_models(credential, BASE_URL)

    @pytest.mark.asyncio
    async def test_entry_without_id(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.get = AsyncMock(return_value=mock_response(200, {"data": [{"object": "model"}]}))

            with pytest.raises(MalformedResponseError):
                await adapter.list_models(credential, BASE_URL)


class TestChatCompletion:
    """Test chat payload construction."""

    @pytest.mark.asyncio
    async def test_payload_with_defaults(self, adapter, credential):
        body = {"id": "chatcmpl-1", "choices": [{"message": {"role": "assistant", "content": "Hi"}}]}
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.post = AsyncMock(return_value=mock_response(200, body))

            result = await adapter.send_chat_completion(
                credential,
                BASE_URL,
                "gpt-4",
                [{"role": "system", "content": "Be brief"}, {"role": "user", "content": "Hello"}],
                ChatOptions(),
            )

            assert result == body
            url = client.post.call_args[0][0]
            payload = client.post.call_args[1]["json"]
            assert url == f"{BASE_URL}/chat/completions"
            assert payload["model"] == "gpt-4"
            assert payload["messages"][0] == {"role": "system", "content": "Be brief"}
            assert payload["max_tokens"] == 1000
            assert payload["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_payload_with_options(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.post = AsyncMock(return_value=mock_response(200, {"choices": []}))

            await adapter.send_chat_completion(
                credential, BASE_URL, "gpt-4",
                [{"role": "user", "content": "Hello"}],
                ChatOptions(max_tokens=50, temperature=0.0),
            )

            payload = client.post.call_args[1]["json"]
            assert payload["max_tokens"] == 50
            assert payload["temperature"] == 0.0

    @pytest.mark.asyncio
    async def test_rate_limited(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.post = AsyncMock(return_value=mock_response(429, {"error": {"message": "Rate limit"}}))

            with pytest.raises(RateLimitError):
                await adapter.send_chat_completion(
                    credential, BASE_URL, "gpt-4",
                    [{"role": "user", "content": "Hello"}], ChatOptions(),
                )

    @pytest.mark.asyncio
    async def test_missing_choices(self, adapter, credential):
        with patch('httpx.AsyncClient') as mock_client:
            client = mock_client.return_value.__aenter__.return_value
            client.post = AsyncMock(return_value=mock_response(200, {"id": "chatcmpl-1"}))

            with pytest.raises(MalformedResponseError):
                await adapter.send_chat_completion(
                    credential, BASE_URL, "gpt-4",
                    [{"role": "user", "content": "Hello"}], ChatOptions(),
                )
