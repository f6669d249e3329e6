"""Model synchronizer: pulls a vendor catalog and upserts it into the model store."""

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from provider_gateway.models.provider import Provider
from provider_gateway.providers.base import ModelDescriptor
from provider_gateway.providers.errors import VENDOR_FAILURES
from provider_gateway.providers.registry import ProviderRegistry, default_registry
from provider_gateway.services.encryption_service import EncryptionService
from provider_gateway.services.model_service import ModelService
from provider_gateway.services.provider_service import ProviderService

logger = logging.getLogger(__name__)


class ModelSynchronizer:
    """Fetches a provider's catalog and upserts every entry by ``(provider_id, model_id)``.

    Rows the vendor no longer lists are kept as they are.
    """

    def __init__(
        self,
        encryption_service: EncryptionService,
        provider_service: ProviderService,
        model_service: ModelService,
        registry: Optional[ProviderRegistry] = None
    ):
        self.encryption_service = encryption_service
        self.provider_service = provider_service
        self.model_service = model_service
        self.registry = registry or default_registry

    async def sync(self, db: Session, provider: Provider) -> List[ModelDescriptor]:
        """Synchronize a provider's model catalog.

        Args:
            db: Database session.
            provider: Provider whose catalog to fetch.

        Returns:
            The descriptors that were upserted.

        Raises:
            UnsupportedProviderError: If the vendor is not supported.
            GatewayError: Any classified vendor failure; nothing is persisted.
            SQLAlchemyError: If the upsert fails; the transaction is rolled back.
        """
        adapter = self.registry.resolve(provider.provider_name)
        credential = self.encryption_service.credential_for(provider)

        try:
            descriptors = await adapter.list_models(credential, provider.effective_base_url)
        except VENDOR_FAILURES as e:
            logger.error(
                f"Failed to fetch models for provider {provider.id} "
                f"({provider.provider_name}, owner {provider.owner_id}): {e}"
            )
            raise

        # A vendor listing the same id twice must not produce two rows
        unique: Dict[str, ModelDescriptor] = {}
        for descriptor in descriptors:
            unique[descriptor.model_id] = descriptor
        descriptors = list(unique.values())

        try:
            for descriptor in descriptors:
                self.model_service.upsert_model(db, provider.id, descriptor)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to store models for provider {provider.id}: {e}")
            raise

        self.provider_service.update_provider_status(db, provider, model_count=len(descriptors))
        logger.info(f"Synchronized {len(descriptors)} models for provider {provider.id}")
        return descriptors
