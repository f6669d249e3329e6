"""Abstract base class and shared types for AI vendor adapters."""

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import httpx

from provider_gateway.config import settings
from provider_gateway.providers.constants import display_name_for
from provider_gateway.providers.credentials import Credential
from provider_gateway.providers.errors import (
    classify_status,
    classify_transport_error,
    decode_json,
)

logger = logging.getLogger(__name__)


@dataclass
class ModelDescriptor:
    """Vendor-independent description of one catalog entry."""

    model_id: str
    name: str
    description: Optional[str] = None
    family: Optional[str] = None
    capabilities: List[str] = field(default_factory=list)
    context_window: Optional[int] = None
    max_tokens: Optional[int] = None
    input_cost: Optional[float] = None
    output_cost: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Columns a catalog sync is allowed to write; user flags are never among them.
CATALOG_FIELDS = tuple(f.name for f in fields(ModelDescriptor) if f.name != "model_id")


@dataclass
class ChatOptions:
    """Caller-supplied generation options; ``None`` means use the default."""

    max_tokens: Optional[int] = None
    temperature: Optional[float] = None

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "ChatOptions":
        options = options or {}
        return cls(
            max_tokens=options.get("max_tokens"),
            temperature=options.get("temperature"),
        )

    @property
    def effective_max_tokens(self) -> int:
        return self.max_tokens if self.max_tokens is not None else settings.default_max_tokens

    @property
    def effective_temperature(self) -> float:
        return self.temperature if self.temperature is not None else settings.default_temperature


def format_model_name(model_id: str) -> str:
    """Turn ``gpt-4-turbo`` into ``Gpt 4 Turbo``."""
    words = model_id.replace("-", " ").replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def extract_model_family(model_id: str) -> str:
    for family in ("gpt-4", "gpt-3.5", "claude", "gemini"):
        if family in model_id:
            return family
    return model_id.split("-")[0] or "unknown"


class ProviderAdapter(ABC):
    """
    Interface every AI vendor adapter implements.

    An adapter holds no credentials and no per-call state: the decrypted
    ``Credential`` and the effective base URL are passed into each call, so
    a single instance can serve every provider row of its vendor.

    Subclasses set ``provider_name`` and declare whether their catalog comes
    from a live endpoint or a static list through ``catalog_source``.
    """

    provider_name: str = ""
    catalog_source: str = "live"
    is_stub: bool = False

    def __init__(self, timeout: Optional[httpx.Timeout] = None):
        self.timeout = timeout or httpx.Timeout(
            settings.request_timeout, connect=settings.connect_timeout
        )

    @property
    def display_name(self) -> str:
        return display_name_for(self.provider_name)

    # -------------------------------------------------------------------------
    # Vendor contract
    # -------------------------------------------------------------------------

    @abstractmethod
    async def test_connection(self, credential: Credential, base_url: str) -> Dict[str, Any]:
        """
        Perform the cheapest vendor call that proves the key is valid.

        Returns:
            Vendor-specific probe details, e.g. ``{"models_count": 42}``.

        Raises:
            GatewayError: A classified failure.
        """

    @abstractmethod
    async def list_models(self, credential: Credential, base_url: str) -> List[ModelDescriptor]:
        """Fetch the vendor catalog, keeping only chat-capable entries."""

    @abstractmethod
    async def send_chat_completion(
        self,
        credential: Credential,
        base_url: str,
        model_id: str,
        messages: Sequence[Mapping[str, str]],
        options: ChatOptions,
    ) -> Dict[str, Any]:
        """
        Translate common messages into the vendor payload and return the raw decoded body.

        Args:
            credential: Decrypted API key for this call only.
            base_url: Effective base URL without trailing slash.
            model_id: Vendor-assigned model identifier.
            messages: ``{"role": ..., "content": ...}`` items, already validated.
            options: Generation options; defaults are applied here.
        """

    # -------------------------------------------------------------------------
    # HTTP helpers
    # -------------------------------------------------------------------------

    def _auth_headers(self, credential: Credential) -> Dict[str, str]:
        return {}

    def _headers(self, credential: Credential) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        headers.update(self._auth_headers(credential))
        return headers

    async def _get(self, url: str, credential: Credential, required: Iterable[str] = ()) -> Dict[str, Any]:
        return await self._request("GET", url, credential, required=required)

    async def _post(
        self,
        url: str,
        credential: Credential,
        payload: Dict[str, Any],
        required: Iterable[str] = (),
    ) -> Dict[str, Any]:
        return await self._request("POST", url, credential, payload=payload, required=required)

    async def _request(
        self,
        method: str,
        url: str,
        credential: Credential,
        payload: Optional[Dict[str, Any]] = None,
        required: Iterable[str] = (),
    ) -> Dict[str, Any]:
        """Issue one vendor call and return its decoded JSON object.

        Transport failures, non-2xx statuses and undecodable bodies are
        raised as classified ``GatewayError`` subclasses.
        """
        headers = self._headers(credential)
        logger.debug(f"{self.provider_name}: {method} {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if method == "GET":
                    response = await client.get(url, headers=headers)
                else:
                    response = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"{self.provider_name}: {method} {url} failed: {type(e).__name__}")
            raise classify_transport_error(self.provider_name, e) from e

        classify_status(self.provider_name, response)
        return decode_json(self.provider_name, response, required)
