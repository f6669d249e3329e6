"""Placeholder adapters for vendors without a live integration yet."""

import logging
from typing import Any, Dict, List, Mapping, Sequence

from provider_gateway.providers.base import ChatOptions, ModelDescriptor, ProviderAdapter
from provider_gateway.providers.credentials import Credential

logger = logging.getLogger(__name__)

STUB_PROVIDER_NAMES = (
    "mistral",
    "meta",
    "cohere",
    "huggingface",
    "perplexity",
    "openrouter",
    "xai",
    "groq",
    "codestral",
)


class StubAdapter(ProviderAdapter):
    """Adapter that makes no network calls.

    Connection tests report an unverified ``ok`` probe, catalogs are empty,
    and chat completions return an empty body. Replacing one of these with a
    real adapter only requires registering the new class under the same
    provider name.
    """

    catalog_source = "static"
    is_stub = True

    def __init__(self, provider_name: str, **kwargs):
        super().__init__(**kwargs)
        self.provider_name = provider_name

    async def test_connection(self, credential: Credential, base_url: str) -> Dict[str, Any]:
        logger.warning(f"{self.provider_name}: connection test is not implemented, key not verified")
        return {"status": "ok", "verified": False}

    async def list_models(self, credential: Credential, base_url: str) -> List[ModelDescriptor]:
        logger.warning(f"{self.provider_name}: model listing is not implemented")
        return []

    async def send_chat_completion(
        self,
        credential: Credential,
        base_url: str,
        model_id: str,
        messages: Sequence[Mapping[str, str]],
        options: ChatOptions,
    ) -> Dict[str, Any]:
        logger.warning(f"{self.provider_name}: chat completion is not implemented")
        return {}
