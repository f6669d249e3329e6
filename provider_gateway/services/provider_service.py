"""Provider service for managing AI vendor connections."""

import logging
from typing import Any, Dict, List, Optional
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from provider_gateway.models.provider import Provider
from provider_gateway.models.model import Model
from provider_gateway.providers.errors import UnsupportedProviderError
from provider_gateway.providers.registry import ProviderRegistry, default_registry
from provider_gateway.services.encryption_service import EncryptionService

logger = logging.getLogger(__name__)


class DuplicateProviderError(ValueError):
    """Raised when an owner already has a provider row for a vendor."""


class ProviderService:
    """Service for managing AI vendor connections."""

    def __init__(
        self,
        encryption_service: EncryptionService,
        registry: Optional[ProviderRegistry] = None
    ):
        """Initialize provider service.

        Args:
            encryption_service: Service for encrypting API keys.
            registry: Adapter registry used to validate vendor identifiers.
        """
        self.encryption_service = encryption_service
        self.registry = registry or default_registry

    def add_provider(
        self,
        db: Session,
        owner_id: int,
        provider_name: str,
        api_key: str,
        base_url: Optional[str] = None,
        region: Optional[str] = None,
        configuration: Optional[Dict[str, Any]] = None
    ) -> Provider:
        """Add a new provider with an encrypted API key and ``configured`` status.

        Args:
            db: Database session.
            owner_id: Owning user ID.
            provider_name: Vendor identifier (openai, google, anthropic, ...).
            api_key: Vendor API key (will be encrypted).
            base_url: Optional base URL override.
            region: Optional vendor region.
            configuration: Optional vendor-specific settings.

        Returns:
            The created Provider instance.

        Raises:
            UnsupportedProviderError: If the vendor is not supported.
            DuplicateProviderError: If the owner already has this vendor.
        """
        if not self.registry.is_supported(provider_name):
            raise UnsupportedProviderError(f"Unsupported provider: '{provider_name}'")

        provider = Provider(
            owner_id=owner_id,
            provider_name=provider_name,
            api_key_encrypted=self.encryption_service.encrypt(api_key),
            base_url=base_url,
            region=region,
            configuration=configuration,
            status="configured",
            model_count=0
        )

        try:
            db.add(provider)
            db.commit()
            db.refresh(provider)
            logger.info(f"Provider '{provider_name}' added for owner {owner_id}")
            return provider
        except IntegrityError as e:
            db.rollback()
            logger.error(f"Failed to add provider '{provider_name}' for owner {owner_id}: {e}")
            raise DuplicateProviderError(
                f"Provider '{provider_name}' is already configured for owner {owner_id}"
            )

    def list_providers(self, db: Session, owner_id: Optional[int] = None) -> List[Provider]:
        """List providers, optionally restricted to one owner.

        Args:
            db: Database session.
            owner_id: Owner to filter by.

        Returns:
            List of Provider instances ordered by ID.
        """
        query = db.query(Provider)
        if owner_id is not None:
            query = query.filter(Provider.owner_id == owner_id)
        return query.order_by(Provider.id).all()

    def get_provider(self, db: Session, provider_id: int) -> Optional[Provider]:
        """Get a provider by ID.

        Args:
            db: Database session.
            provider_id: Provider ID.

        Returns:
            Provider instance or None if not found.
        """
        return db.query(Provider).filter(Provider.id == provider_id).first()

    def count_active_models(self, db: Session, provider_id: int) -> int:
        return db.query(Model).filter(
            Model.provider_id == provider_id,
            Model.is_active == True  # noqa: E712
        ).count()

    def update_provider(
        self,
        db: Session,
        provider_id: int,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        region: Optional[str] = None,
        configuration: Optional[Dict[str, Any]] = None
    ) -> Optional[Provider]:
        """Update a provider.

        A new API key resets the status to ``configured`` since the previous
        test result no longer describes it.

        Args:
            db: Database session.
            provider_id: Provider ID.
            api_key: New API key (optional, will be encrypted).
            base_url: New base URL override (optional).
            region: New region (optional).
            configuration: New vendor-specific settings (optional).

        Returns:
            Updated Provider instance or None if not found.
        """
        provider = self.get_provider(db, provider_id)
        if not provider:
            return None

        if api_key:
            provider.api_key_encrypted = self.encryption_service.encrypt(api_key)
            provider.status = "configured"
        if base_url is not None:
            provider.base_url = base_url or None
        if region is not None:
            provider.region = region or None
        if configuration is not None:
            provider.configuration = configuration

        provider.updated_at = datetime.utcnow()

        try:
            db.commit()
            db.refresh(provider)
            logger.info(f"Provider {provider_id} updated successfully")
            return provider
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update provider {provider_id}: {e}")
            raise

    def update_provider_status(
        self,
        db: Session,
        provider: Provider,
        status: Optional[str] = None,
        test_result: Optional[Dict[str, Any]] = None,
        model_count: Optional[int] = None
    ) -> Provider:
        """Persist a status transition and/or catalog count in a single commit.

        Args:
            db: Database session.
            provider: Provider to update.
            status: New status (configured, ready, error).
            test_result: Connection test result to store; also stamps last_tested_at.
            model_count: Number of models returned by the latest sync.

        Returns:
            The refreshed Provider instance.
        """
        if status is not None:
            provider.status = status
        if test_result is not None:
            provider.test_result = test_result
            provider.last_tested_at = datetime.utcnow()
        if model_count is not None:
            provider.model_count = model_count

        try:
            db.commit()
            db.refresh(provider)
            return provider
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update status of provider {provider.id}: {e}")
            raise

    def delete_provider(self, db: Session, provider_id: int) -> bool:
        """Delete a provider with cascade deletion of associated models.

        Args:
            db: Database session.
            provider_id: Provider ID.

        Returns:
            True if deleted, False if provider not found.
        """
        provider = self.get_provider(db, provider_id)
        if not provider:
            return False

        # Count associated models for logging
        model_count = db.query(Model).filter(Model.provider_id == provider_id).count()

        try:
            db.delete(provider)
            db.commit()
            logger.info(f"Provider {provider_id} deleted successfully (cascade deleted {model_count} models)")
            return True
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to delete provider {provider_id}: {e}")
            raise
