"""AI vendor adapters and the registry that resolves them."""

from provider_gateway.providers.base import ChatOptions, ModelDescriptor, ProviderAdapter
from provider_gateway.providers.credentials import Credential
from provider_gateway.providers.registry import ProviderRegistry, default_registry

__all__ = [
    "ChatOptions",
    "Credential",
    "ModelDescriptor",
    "ProviderAdapter",
    "ProviderRegistry",
    "default_registry",
]
