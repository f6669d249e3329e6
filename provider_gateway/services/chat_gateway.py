"""Chat gateway: validates a chat request and relays it through the vendor adapter."""

import logging
import time
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence

from provider_gateway.models.model import Model
from provider_gateway.providers.base import ChatOptions
from provider_gateway.providers.constants import CHAT_ROLES
from provider_gateway.providers.errors import VENDOR_FAILURES, ValidationError
from provider_gateway.providers.registry import ProviderRegistry, default_registry
from provider_gateway.services.encryption_service import EncryptionService

logger = logging.getLogger(__name__)

MAX_TOKENS_LIMIT = 4000
TEMPERATURE_RANGE = (0.0, 2.0)


class ChatCompletionResult(NamedTuple):
    """Vendor response body, passed through unchanged, plus measured latency."""

    response: Dict[str, Any]
    latency_ms: int


def validate_messages(messages: Any) -> List[Dict[str, str]]:
    """Check the common message shape and return plain ``{"role", "content"}`` dicts.

    Raises:
        ValidationError: If the list is empty, holds only system messages,
            or any message is malformed.
    """
    if isinstance(messages, (str, bytes)) or not isinstance(messages, Sequence):
        raise ValidationError("messages must be a list")
    if not messages:
        raise ValidationError("messages must contain at least one message")

    cleaned = []
    for index, message in enumerate(messages):
        if not isinstance(message, Mapping):
            raise ValidationError(f"messages[{index}] must be an object")
        role = message.get("role")
        content = message.get("content")
        if role not in CHAT_ROLES:
            raise ValidationError(
                f"messages[{index}].role must be one of {', '.join(CHAT_ROLES)}"
            )
        if not isinstance(content, str) or not content.strip():
            raise ValidationError(f"messages[{index}].content must be a non-empty string")
        cleaned.append({"role": role, "content": content})

    # System messages are lifted out of the turn list by some vendors
    if not any(message["role"] != "system" for message in cleaned):
        raise ValidationError("messages must contain at least one user or assistant message")
    return cleaned


def validate_options(options: Optional[Mapping[str, Any]]) -> ChatOptions:
    """Check ``max_tokens`` and ``temperature`` bounds; unknown keys are ignored.

    Raises:
        ValidationError: If an option is out of range or of the wrong type.
    """
    chat_options = ChatOptions.from_mapping(options)

    max_tokens = chat_options.max_tokens
    if max_tokens is not None:
        if isinstance(max_tokens, bool) or not isinstance(max_tokens, int):
            raise ValidationError("max_tokens must be an integer")
        if not 1 <= max_tokens <= MAX_TOKENS_LIMIT:
            raise ValidationError(f"max_tokens must be between 1 and {MAX_TOKENS_LIMIT}")

    temperature = chat_options.temperature
    if temperature is not None:
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise ValidationError("temperature must be a number")
        low, high = TEMPERATURE_RANGE
        if not low <= temperature <= high:
            raise ValidationError(f"temperature must be between {low:g} and {high:g}")

    return chat_options


class ChatGateway:
    """Sends one chat completion to a model's vendor.

    Request validation happens before the credential is decrypted or any
    network call is made. Classified vendor failures are re-raised to the
    caller, annotated with the vendor name.
    """

    def __init__(self, encryption_service: EncryptionService, registry: Optional[ProviderRegistry] = None):
        self.encryption_service = encryption_service
        self.registry = registry or default_registry

    async def complete(
        self,
        model: Model,
        messages: Sequence[Mapping[str, Any]],
        options: Optional[Mapping[str, Any]] = None
    ) -> ChatCompletionResult:
        """Send a chat completion request for ``model``.

        Args:
            model: Model row; its provider supplies vendor, base URL and key.
            messages: ``{"role": ..., "content": ...}`` items.
            options: Optional ``max_tokens`` / ``temperature``.

        Returns:
            ChatCompletionResult with the raw vendor response and latency.

        Raises:
            ValidationError: If the request is malformed.
            UnsupportedProviderError: If the model's vendor is not supported.
            GatewayError: Any classified vendor failure.
        """
        cleaned = validate_messages(messages)
        chat_options = validate_options(options)

        provider = model.provider
        adapter = self.registry.resolve(provider.provider_name)
        credential = self.encryption_service.credential_for(provider)

        start = time.perf_counter()
        try:
            response = await adapter.send_chat_completion(
                credential,
                provider.effective_base_url,
                model.model_id,
                cleaned,
                chat_options,
            )
        except VENDOR_FAILURES as e:
            logger.error(f"Chat completion with {model.model_id} failed: {e}")
            raise
        latency_ms = int(round((time.perf_counter() - start) * 1000))

        logger.info(
            f"Chat completion with {provider.provider_name}:{model.model_id} "
            f"({len(cleaned)} messages) took {latency_ms}ms"
        )
        return ChatCompletionResult(response, latency_ms)
