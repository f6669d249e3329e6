"""Connection tester: probes a provider's credentials and records the outcome."""

import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from provider_gateway.models.provider import Provider
from provider_gateway.providers.errors import CONNECTION_FAILURES
from provider_gateway.providers.registry import ProviderRegistry, default_registry
from provider_gateway.services.encryption_service import EncryptionService
from provider_gateway.services.provider_service import ProviderService

logger = logging.getLogger(__name__)


@dataclass
class ConnectionTestResult:
    """Outcome of one connection test; stored as ``Provider.test_result``."""

    success: bool
    message: str
    latency: int
    timestamp: str
    details: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.success:
            data.pop("error")
            data.pop("error_kind")
        else:
            data.pop("details")
        return data


def _elapsed_ms(start: float) -> int:
    return int(round((time.perf_counter() - start) * 1000))


class ConnectionTester:
    """Runs a provider's connection probe and persists ``ready`` or ``error``.

    A failed test is an expected outcome, so classified failures are
    captured into the returned result instead of being raised.
    """

    def __init__(
        self,
        encryption_service: EncryptionService,
        provider_service: ProviderService,
        registry: Optional[ProviderRegistry] = None
    ):
        self.encryption_service = encryption_service
        self.provider_service = provider_service
        self.registry = registry or default_registry

    async def test(self, db: Session, provider: Provider) -> ConnectionTestResult:
        """Test a provider's connection and persist status and test_result.

        Args:
            db: Database session.
            provider: Provider to test.

        Returns:
            The ConnectionTestResult that was persisted.
        """
        start = time.perf_counter()
        try:
            adapter = self.registry.resolve(provider.provider_name)
            credential = self.encryption_service.credential_for(provider)
            details = await adapter.test_connection(credential, provider.effective_base_url)
        except CONNECTION_FAILURES as e:
            result = ConnectionTestResult(
                success=False,
                message=f"Connection failed: {e.message}",
                latency=_elapsed_ms(start),
                timestamp=datetime.utcnow().isoformat(),
                error=e.message,
                error_kind=e.kind,
            )
            status = "error"
            logger.error(
                f"Connection test failed for provider {provider.id} "
                f"({provider.provider_name}, owner {provider.owner_id}): {e.kind}: {e.message}"
            )
        else:
            if adapter.is_stub:
                message = f"Connection not verified: {adapter.display_name} integration is not implemented yet."
            else:
                message = "Connection successful! API key is valid."
            result = ConnectionTestResult(
                success=True,
                message=message,
                latency=_elapsed_ms(start),
                timestamp=datetime.utcnow().isoformat(),
                details=details,
            )
            status = "ready"
            logger.info(
                f"Connection test passed for provider {provider.id} "
                f"({provider.provider_name}) in {result.latency}ms"
            )

        self.provider_service.update_provider_status(
            db, provider, status=status, test_result=result.to_dict()
        )
        return result
