"""FastAPI dependency providers for the service layer."""

from fastapi import Depends

from provider_gateway.services.chat_gateway import ChatGateway
from provider_gateway.services.connection_tester import ConnectionTester
from provider_gateway.services.encryption_service import EncryptionService
from provider_gateway.services.model_service import ModelService
from provider_gateway.services.model_synchronizer import ModelSynchronizer
from provider_gateway.services.provider_service import ProviderService


def get_encryption_service() -> EncryptionService:
    """Get encryption service instance."""
    return EncryptionService()


def get_provider_service(
    encryption_service: EncryptionService = Depends(get_encryption_service)
) -> ProviderService:
    """Get provider service instance."""
    return ProviderService(encryption_service)


def get_model_service() -> ModelService:
    """Get model service instance."""
    return ModelService()


def get_connection_tester(
    encryption_service: EncryptionService = Depends(get_encryption_service),
    provider_service: ProviderService = Depends(get_provider_service)
) -> ConnectionTester:
    return ConnectionTester(encryption_service, provider_service)


def get_model_synchronizer(
    encryption_service: EncryptionService = Depends(get_encryption_service),
    provider_service: ProviderService = Depends(get_provider_service),
    model_service: ModelService = Depends(get_model_service)
) -> ModelSynchronizer:
    return ModelSynchronizer(encryption_service, provider_service, model_service)


def get_chat_gateway(
    encryption_service: EncryptionService = Depends(get_encryption_service)
) -> ChatGateway:
    return ChatGateway(encryption_service)
