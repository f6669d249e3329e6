"""
Registry mapping provider identifiers to adapter instances.
"""

import logging
from typing import Dict, List

from provider_gateway.providers.anthropic import AnthropicAdapter
from provider_gateway.providers.base import ProviderAdapter
from provider_gateway.providers.constants import PROVIDER_NAMES
from provider_gateway.providers.errors import UnsupportedProviderError
from provider_gateway.providers.google import GoogleAdapter
from provider_gateway.providers.openai import OpenAIAdapter
from provider_gateway.providers.stubs import STUB_PROVIDER_NAMES, StubAdapter

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Lookup table from provider identifier to its adapter.

    Only identifiers in the closed ``PROVIDER_NAMES`` set can be registered,
    and ``resolve`` fails with ``UnsupportedProviderError`` before any
    network activity for anything it does not know.

    Example:
        registry = ProviderRegistry()
        registry.register(OpenAIAdapter())
        adapter = registry.resolve("openai")
    """

    def __init__(self):
        self._adapters: Dict[str, ProviderAdapter] = {}

    def register(self, adapter: ProviderAdapter) -> None:
        """
        Register an adapter under its ``provider_name``, replacing any previous one.

        Raises:
            UnsupportedProviderError: If the adapter's vendor is not supported.
        """
        name = adapter.provider_name
        if name not in PROVIDER_NAMES:
            raise UnsupportedProviderError(f"Cannot register adapter for unsupported provider '{name}'")
        self._adapters[name] = adapter
        logger.debug(f"Registered provider adapter: {name}")

    def resolve(self, provider_name: str) -> ProviderAdapter:
        """
        Return the adapter bound to ``provider_name``.

        Raises:
            UnsupportedProviderError: If no adapter is registered for it.
        """
        adapter = self._adapters.get(provider_name)
        if adapter is None:
            available = ", ".join(self.supported())
            raise UnsupportedProviderError(
                f"Unsupported provider: '{provider_name}'. Available: {available}"
            )
        return adapter

    def is_supported(self, provider_name: str) -> bool:
        return provider_name in self._adapters

    def supported(self) -> List[str]:
        return list(self._adapters.keys())


def build_default_registry() -> ProviderRegistry:
    """Create a registry holding one adapter for every supported vendor."""
    registry = ProviderRegistry()
    registry.register(OpenAIAdapter())
    registry.register(GoogleAdapter())
    registry.register(AnthropicAdapter())
    for name in STUB_PROVIDER_NAMES:
        registry.register(StubAdapter(name))
    return registry


default_registry = build_default_registry()
