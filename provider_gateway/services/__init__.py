"""Services package."""

from provider_gateway.services.encryption_service import EncryptionService
from provider_gateway.services.provider_service import ProviderService, DuplicateProviderError
from provider_gateway.services.model_service import ModelService
from provider_gateway.services.connection_tester import ConnectionTester, ConnectionTestResult
from provider_gateway.services.model_synchronizer import ModelSynchronizer
from provider_gateway.services.chat_gateway import ChatGateway, ChatCompletionResult

__all__ = [
    "EncryptionService",
    "ProviderService",
    "DuplicateProviderError",
    "ModelService",
    "ConnectionTester",
    "ConnectionTestResult",
    "ModelSynchronizer",
    "ChatGateway",
    "ChatCompletionResult",
]
