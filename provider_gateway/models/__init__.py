"""Database models package."""

from provider_gateway.models.provider import Provider
from provider_gateway.models.model import Model

__all__ = [
    "Provider",
    "Model",
]
