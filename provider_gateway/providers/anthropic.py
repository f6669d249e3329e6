"""Anthropic adapter: ``x-api-key`` auth, static catalog, ``/v1/messages`` chat."""

import logging
from typing import Any, Dict, List, Mapping, Sequence

from provider_gateway.config import settings
from provider_gateway.providers.base import ChatOptions, ModelDescriptor, ProviderAdapter
from provider_gateway.providers.credentials import Credential

logger = logging.getLogger(__name__)

# Anthropic exposes no catalog endpoint, so the known models are listed here.
# Bump CATALOG_VERSION whenever the list changes.
CATALOG_VERSION = "2024-03"

ANTHROPIC_MODELS = (
    ModelDescriptor(
        model_id="claude-3-opus-20240229",
        name="Claude 3 Opus",
        description="Most powerful model for highly complex tasks",
        family="claude-3",
        capabilities=["text", "analysis", "coding"],
        context_window=200000,
        input_cost=0.015,
        output_cost=0.075,
    ),
    ModelDescriptor(
        model_id="claude-3-sonnet-20240229",
        name="Claude 3 Sonnet",
        description="Balance of intelligence and speed",
        family="claude-3",
        capabilities=["text", "analysis", "coding"],
        context_window=200000,
        input_cost=0.003,
        output_cost=0.015,
    ),
    ModelDescriptor(
        model_id="claude-3-haiku-20240307",
        name="Claude 3 Haiku",
        description="Fastest and most compact model",
        family="claude-3",
        capabilities=["text", "analysis"],
        context_window=200000,
        input_cost=0.00025,
        output_cost=0.00125,
    ),
)

PROBE_MODEL = "claude-3-haiku-20240307"


class AnthropicAdapter(ProviderAdapter):
    """Adapter for the Anthropic Messages API."""

    provider_name = "anthropic"
    catalog_source = "static"

    def _auth_headers(self, credential: Credential) -> Dict[str, str]:
        return {
            "x-api-key": credential.reveal(),
            "anthropic-version": settings.anthropic_version,
        }

    async def test_connection(self, credential: Credential, base_url: str) -> Dict[str, Any]:
        payload = {
            "model": PROBE_MODEL,
            "max_tokens": 10,
            "messages": [{"role": "user", "content": "Hi"}],
        }
        data = await self._post(f"{base_url}/v1/messages", credential, payload)
        return {"status": "ok", "model": data.get("model", PROBE_MODEL)}

    async def list_models(self, credential: Credential, base_url: str) -> List[ModelDescriptor]:
        logger.info(f"Using static Anthropic catalog version {CATALOG_VERSION}")
        return [ModelDescriptor(**model.to_dict()) for model in ANTHROPIC_MODELS]

    async def send_chat_completion(
        self,
        credential: Credential,
        base_url: str,
        model_id: str,
        messages: Sequence[Mapping[str, str]],
        options: ChatOptions,
    ) -> Dict[str, Any]:
        # The messages array only accepts user/assistant turns
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        payload = {
            "model": model_id,
            "max_tokens": options.effective_max_tokens,
            "messages": [
                {"role": m["role"], "content": m["content"]}
                for m in messages
                if m["role"] != "system"
            ],
        }
        if system:
            payload["system"] = system
        if options.temperature is not None:
            payload["temperature"] = options.temperature

        return await self._post(
            f"{base_url}/v1/messages", credential, payload, required=("content",)
        )
