"""OpenAI adapter: bearer auth, live ``/models`` catalog, ``/chat/completions``."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from provider_gateway.providers.base import (
    ChatOptions,
    ModelDescriptor,
    ProviderAdapter,
    extract_model_family,
    format_model_name,
)
from provider_gateway.providers.credentials import Credential
from provider_gateway.providers.errors import MalformedResponseError

logger = logging.getLogger(__name__)

# Ordered most-specific first; the first substring found in the model id wins.
_CONTEXT_WINDOWS = (
    ("gpt-4-turbo", 128000),
    ("gpt-4", 8192),
    ("gpt-3.5-turbo", 16385),
)

_INPUT_COSTS = (
    ("gpt-4-turbo", 0.01),
    ("gpt-4", 0.03),
    ("gpt-3.5-turbo", 0.0015),
)

_OUTPUT_COSTS = (
    ("gpt-4-turbo", 0.03),
    ("gpt-4", 0.06),
    ("gpt-3.5-turbo", 0.002),
)


def _lookup(table, model_id: str) -> Optional[Any]:
    for needle, value in table:
        if needle in model_id:
            return value
    return None


def openai_capabilities(model_id: str) -> List[str]:
    if "gpt-4" in model_id:
        return ["text", "code", "analysis", "reasoning"]
    return ["text", "code"]


class OpenAIAdapter(ProviderAdapter):
    """Adapter for the OpenAI REST API."""

    provider_name = "openai"
    catalog_source = "live"

    def _auth_headers(self, credential: Credential) -> Dict[str, str]:
        return {"Authorization": f"Bearer {credential.reveal()}"}

    async def test_connection(self, credential: Credential, base_url: str) -> Dict[str, Any]:
        data = await self._get(f"{base_url}/models", credential)
        entries = data.get("data") or []
        if not isinstance(entries, list):
            raise MalformedResponseError("'data' is not a list", self.provider_name)
        return {"models_count": len(entries)}

    async def list_models(self, credential: Credential, base_url: str) -> List[ModelDescriptor]:
        data = await self._get(f"{base_url}/models", credential, required=("data",))
        entries = data["data"]
        if not isinstance(entries, list):
            raise MalformedResponseError("'data' is not a list", self.provider_name)

        models = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("id"):
                raise MalformedResponseError("Model entry without an 'id'", self.provider_name)
            model_id = entry["id"]
            models.append(
                ModelDescriptor(
                    model_id=model_id,
                    name=format_model_name(model_id),
                    description=f"OpenAI model: {model_id}",
                    family=extract_model_family(model_id),
                    capabilities=openai_capabilities(model_id),
                    context_window=_lookup(_CONTEXT_WINDOWS, model_id),
                    input_cost=_lookup(_INPUT_COSTS, model_id),
                    output_cost=_lookup(_OUTPUT_COSTS, model_id),
                )
            )

        logger.info(f"Fetched {len(models)} models from {base_url}")
        return models

    async def send_chat_completion(
        self,
        credential: Credential,
        base_url: str,
        model_id: str,
        messages: Sequence[Mapping[str, str]],
        options: ChatOptions,
    ) -> Dict[str, Any]:
        payload = {
            "model": model_id,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "max_tokens": options.effective_max_tokens,
            "temperature": options.effective_temperature,
        }
        return await self._post(
            f"{base_url}/chat/completions", credential, payload, required=("choices",)
        )
