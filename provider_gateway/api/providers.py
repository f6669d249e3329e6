"""Provider API endpoints."""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from provider_gateway.api.dependencies import (
    get_connection_tester,
    get_model_service,
    get_model_synchronizer,
    get_provider_service,
)
from provider_gateway.api.errors import http_error_for
from provider_gateway.api.models import ModelResponse, to_model_response
from provider_gateway.database.database import get_db
from provider_gateway.models.provider import Provider
from provider_gateway.providers.errors import GatewayError
from provider_gateway.services.connection_tester import ConnectionTester
from provider_gateway.services.model_service import ModelService
from provider_gateway.services.model_synchronizer import ModelSynchronizer
from provider_gateway.services.provider_service import DuplicateProviderError, ProviderService

router = APIRouter(prefix="/api/ai-providers", tags=["providers"])


class ProviderCreate(BaseModel):
    """Provider creation request."""

    owner_id: int
    provider_name: str
    api_key: str = Field(..., min_length=10)
    base_url: Optional[str] = None
    region: Optional[str] = Field(None, max_length=100)
    configuration: Optional[Dict[str, Any]] = None


class ProviderUpdate(BaseModel):
    """Provider update request."""

    api_key: Optional[str] = Field(None, min_length=10)
    base_url: Optional[str] = None
    region: Optional[str] = Field(None, max_length=100)
    configuration: Optional[Dict[str, Any]] = None


class ProviderResponse(BaseModel):
    """Provider response. Key material is never included."""

    id: int
    owner_id: int
    provider_name: str
    display_name: str
    status: str
    base_url: Optional[str] = None
    region: Optional[str] = None
    configuration: Optional[Dict[str, Any]] = None
    model_count: int = 0
    active_models: int = 0
    last_tested_at: Optional[str] = None
    test_result: Optional[Dict[str, Any]] = None
    created_at: str
    updated_at: str


class ConnectionTestResponse(BaseModel):
    """Connection test response."""

    success: bool
    message: str
    latency: int
    timestamp: str
    details: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    status: str


class FetchModelsResponse(BaseModel):
    """Fetch models response."""

    provider_id: int
    models_fetched: int
    models: List[ModelResponse]


def to_provider_response(
    provider: Provider,
    service: ProviderService,
    db: Session
) -> ProviderResponse:
    """Serialize a Provider row with its active model count."""
    return ProviderResponse(
        id=provider.id,
        owner_id=provider.owner_id,
        provider_name=provider.provider_name,
        display_name=provider.display_name,
        status=provider.status,
        base_url=provider.effective_base_url,
        region=provider.region,
        configuration=provider.configuration,
        model_count=provider.model_count or 0,
        active_models=service.count_active_models(db, provider.id),
        last_tested_at=provider.last_tested_at.isoformat() if provider.last_tested_at else None,
        test_result=provider.test_result,
        created_at=provider.created_at.isoformat(),
        updated_at=provider.updated_at.isoformat(),
    )


def _get_provider_or_404(db: Session, service: ProviderService, provider_id: int) -> Provider:
    provider = service.get_provider(db, provider_id)
    if not provider:
        raise HTTPException(status_code=404, detail=f"Provider {provider_id} not found")
    return provider


@router.post("", response_model=ProviderResponse, status_code=201)
async def create_provider(
    provider: ProviderCreate,
    db: Session = Depends(get_db),
    service: ProviderService = Depends(get_provider_service)
):
    """Create a provider connection.

    The API key is encrypted before it is stored and the provider starts
    in the ``configured`` state.
    """
    try:
        new_provider = service.add_provider(
            db=db,
            owner_id=provider.owner_id,
            provider_name=provider.provider_name,
            api_key=provider.api_key,
            base_url=provider.base_url,
            region=provider.region,
            configuration=provider.configuration,
        )
        return to_provider_response(new_provider, service, db)
    except GatewayError as e:
        raise http_error_for(e)
    except DuplicateProviderError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create provider: {str(e)}")


@router.get("", response_model=List[ProviderResponse])
async def list_providers(
    owner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    service: ProviderService = Depends(get_provider_service)
):
    """List providers, optionally for one owner."""
    try:
        providers = service.list_providers(db, owner_id)
        return [to_provider_response(p, service, db) for p in providers]
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to list providers: {str(e)}")


@router.get("/{provider_id}", response_model=ProviderResponse)
async def get_provider(
    provider_id: int,
    db: Session = Depends(get_db),
    service: ProviderService = Depends(get_provider_service)
):
    """Get provider details by ID."""
    provider = _get_provider_or_404(db, service, provider_id)
    return to_provider_response(provider, service, db)


@router.put("/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: int,
    provider_update: ProviderUpdate,
    db: Session = Depends(get_db),
    service: ProviderService = Depends(get_provider_service)
):
    """Update a provider.

    Replacing the API key returns the provider to ``configured`` until it
    is tested again.
    """
    try:
        updated_provider = service.update_provider(
            db=db,
            provider_id=provider_id,
            api_key=provider_update.api_key,
            base_url=provider_update.base_url,
            region=provider_update.region,
            configuration=provider_update.configuration,
        )
        if not updated_provider:
            raise HTTPException(status_code=404, detail=f"Provider {provider_id} not found")
        return to_provider_response(updated_provider, service, db)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update provider: {str(e)}")


@router.delete("/{provider_id}", status_code=204)
async def delete_provider(
    provider_id: int,
    db: Session = Depends(get_db),
    service: ProviderService = Depends(get_provider_service)
):
    """Delete a provider with cascade deletion of associated models."""
    try:
        deleted = service.delete_provider(db, provider_id)
        if not deleted:
            raise HTTPException(status_code=404, detail=f"Provider {provider_id} not found")
        return None
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete provider: {str(e)}")


@router.post("/{provider_id}/test", response_model=ConnectionTestResponse)
async def test_connection(
    provider_id: int,
    db: Session = Depends(get_db),
    service: ProviderService = Depends(get_provider_service),
    tester: ConnectionTester = Depends(get_connection_tester)
):
    """Test a provider's credentials against its vendor.

    A failed test is reported in the body with ``success: false``; the
    provider's status is updated either way.
    """
    provider = _get_provider_or_404(db, service, provider_id)
    result = await tester.test(db, provider)
    return ConnectionTestResponse(status=provider.status, **result.to_dict())


@router.post("/{provider_id}/fetch-models", response_model=FetchModelsResponse)
async def fetch_models(
    provider_id: int,
    db: Session = Depends(get_db),
    service: ProviderService = Depends(get_provider_service),
    model_service: ModelService = Depends(get_model_service),
    synchronizer: ModelSynchronizer = Depends(get_model_synchronizer)
):
    """Fetch the vendor's model catalog and store it."""
    provider = _get_provider_or_404(db, service, provider_id)

    try:
        descriptors = await synchronizer.sync(db, provider)
    except GatewayError as e:
        raise http_error_for(e, prefix="Failed to fetch models: ")
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch models: {str(e)}")

    fetched_ids = {d.model_id for d in descriptors}
    models = [
        m for m in model_service.get_models_by_provider(db, provider_id)
        if m.model_id in fetched_ids
    ]
    return FetchModelsResponse(
        provider_id=provider_id,
        models_fetched=len(descriptors),
        models=[to_model_response(m) for m in models],
    )


@router.get("/{provider_id}/models", response_model=List[ModelResponse])
async def list_provider_models(
    provider_id: int,
    active: bool = False,
    saved: bool = False,
    not_deprecated: bool = False,
    db: Session = Depends(get_db),
    service: ProviderService = Depends(get_provider_service),
    model_service: ModelService = Depends(get_model_service)
):
    """List stored models for a provider."""
    _get_provider_or_404(db, service, provider_id)
    models = model_service.get_models_by_provider(db, provider_id, active, saved, not_deprecated)
    return [to_model_response(m) for m in models]
