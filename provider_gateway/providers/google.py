"""Google Gemini adapter: ``x-goog-api-key`` auth, ``:generateContent`` chat."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from provider_gateway.providers.base import (
    ChatOptions,
    ModelDescriptor,
    ProviderAdapter,
    format_model_name,
)
from provider_gateway.providers.credentials import Credential
from provider_gateway.providers.errors import MalformedResponseError

logger = logging.getLogger(__name__)

_ROLE_MAP = {"user": "user", "assistant": "model"}


def google_context_window(model_id: str) -> Optional[int]:
    if "gemini-pro" in model_id:
        return 32768
    if "gemini" in model_id:
        return 30720
    return None


def to_gemini_contents(
    messages: Sequence[Mapping[str, str]],
) -> Tuple[Optional[Dict[str, Any]], List[Dict[str, Any]]]:
    """Convert common messages into Gemini ``contents`` plus a ``systemInstruction``.

    ``assistant`` turns become ``model`` turns. System messages are not
    turns in Gemini; they are concatenated into the separate system
    instruction, which is ``None`` when there were none.
    """
    system_parts = []
    contents = []
    for message in messages:
        role = message["role"]
        if role == "system":
            system_parts.append({"text": message["content"]})
            continue
        contents.append({"role": _ROLE_MAP[role], "parts": [{"text": message["content"]}]})

    system_instruction = {"parts": system_parts} if system_parts else None
    return system_instruction, contents


class GoogleAdapter(ProviderAdapter):
    """Adapter for the Google Generative Language (Gemini) API."""

    provider_name = "google"
    catalog_source = "live"

    def _auth_headers(self, credential: Credential) -> Dict[str, str]:
        return {"x-goog-api-key": credential.reveal()}

    async def test_connection(self, credential: Credential, base_url: str) -> Dict[str, Any]:
        data = await self._get(f"{base_url}/models", credential)
        entries = data.get("models") or []
        if not isinstance(entries, list):
            raise MalformedResponseError("'models' is not a list", self.provider_name)
        return {"models_count": len(entries)}

    async def list_models(self, credential: Credential, base_url: str) -> List[ModelDescriptor]:
        data = await self._get(f"{base_url}/models", credential, required=("models",))
        entries = data["models"]
        if not isinstance(entries, list):
            raise MalformedResponseError("'models' is not a list", self.provider_name)

        models = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("name"):
                raise MalformedResponseError("Model entry without a 'name'", self.provider_name)
            # Embedding-only and other non-chat models lack generateContent
            if "generateContent" not in (entry.get("supportedGenerationMethods") or []):
                continue

            # Format: models/gemini-1.5-flash -> gemini-1.5-flash
            model_id = entry["name"].rsplit("/", 1)[-1]
            models.append(
                ModelDescriptor(
                    model_id=model_id,
                    name=entry.get("displayName") or format_model_name(model_id),
                    description=entry.get("description") or "Google Gemini model",
                    family="gemini",
                    capabilities=["text", "multimodal"],
                    context_window=entry.get("inputTokenLimit") or google_context_window(model_id),
                    max_tokens=entry.get("outputTokenLimit"),
                )
            )

        logger.info(
            f"Fetched {len(models)} chat-capable models of {len(entries)} from {base_url}"
        )
        return models

    async def send_chat_completion(
        self,
        credential: Credential,
        base_url: str,
        model_id: str,
        messages: Sequence[Mapping[str, str]],
        options: ChatOptions,
    ) -> Dict[str, Any]:
        system_instruction, contents = to_gemini_contents(messages)
        payload = {
            "contents": contents,
            "generationConfig": {
                "maxOutputTokens": options.effective_max_tokens,
                "temperature": options.effective_temperature,
            },
        }
        if system_instruction:
            payload["systemInstruction"] = system_instruction

        return await self._post(
            f"{base_url}/models/{model_id}:generateContent",
            credential,
            payload,
            required=("candidates",),
        )
