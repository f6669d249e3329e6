"""Model API endpoints."""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from provider_gateway.api.dependencies import get_chat_gateway, get_model_service
from provider_gateway.api.errors import http_error_for
from provider_gateway.database.database import get_db
from provider_gateway.models.model import Model
from provider_gateway.providers.errors import GatewayError
from provider_gateway.services.chat_gateway import ChatGateway
from provider_gateway.services.model_service import ModelService

router = APIRouter(prefix="/api/ai-models", tags=["models"])


class ModelProviderSummary(BaseModel):
    """Owning provider summary embedded in model listings."""

    id: int
    name: str
    display_name: str
    status: str


class ModelResponse(BaseModel):
    """Model response."""

    id: int
    provider_id: int
    model_id: str
    name: str
    description: Optional[str] = None
    family: Optional[str] = None
    context_window: Optional[int] = None
    max_tokens: Optional[int] = None
    input_cost: Optional[float] = None
    output_cost: Optional[float] = None
    capabilities: List[str] = []
    is_deprecated: bool
    is_saved: bool
    is_active: bool
    is_default: bool
    release_date: Optional[str] = None
    full_identifier: str
    cost_per_1k_tokens: Dict[str, Optional[float]]
    provider: Optional[ModelProviderSummary] = None


class ModelFlagsUpdate(BaseModel):
    """Model flags update request."""

    is_saved: Optional[bool] = None
    is_active: Optional[bool] = None
    is_default: Optional[bool] = None


class ChatMessageIn(BaseModel):
    """One chat message; role and content are checked by the chat gateway."""

    role: str
    content: str


class ChatRequest(BaseModel):
    """Chat completion request."""

    messages: List[ChatMessageIn]
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None


class ChatResponse(BaseModel):
    """Chat completion response."""

    response: Dict[str, Any]
    response_time_ms: int
    model_used: str
    provider: str


def to_model_response(model: Model, include_provider: bool = False) -> ModelResponse:
    """Serialize a Model row, optionally embedding its provider summary."""
    provider = None
    if include_provider:
        provider = ModelProviderSummary(
            id=model.provider.id,
            name=model.provider.provider_name,
            display_name=model.provider.display_name,
            status=model.provider.status,
        )
    return ModelResponse(
        id=model.id,
        provider_id=model.provider_id,
        model_id=model.model_id,
        name=model.name,
        description=model.description,
        family=model.family,
        context_window=model.context_window,
        max_tokens=model.max_tokens,
        input_cost=model.input_cost,
        output_cost=model.output_cost,
        capabilities=model.capabilities or [],
        is_deprecated=model.is_deprecated,
        is_saved=model.is_saved,
        is_active=model.is_active,
        is_default=model.is_default,
        release_date=model.release_date.isoformat() if model.release_date else None,
        full_identifier=model.full_identifier,
        cost_per_1k_tokens=model.cost_per_1k_tokens,
        provider=provider,
    )


@router.get("", response_model=List[ModelResponse])
async def list_all_models(
    owner_id: Optional[int] = None,
    active: bool = False,
    saved: bool = False,
    not_deprecated: bool = False,
    db: Session = Depends(get_db),
    service: ModelService = Depends(get_model_service)
):
    """List models across an owner's providers."""
    models = service.get_all_models(db, owner_id, active, saved, not_deprecated)
    return [to_model_response(m, include_provider=True) for m in models]


@router.get("/active", response_model=List[ModelResponse])
async def list_active_models(
    owner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    service: ModelService = Depends(get_model_service)
):
    """List active, non-deprecated models whose provider passed its connection test."""
    models = service.get_active_models(db, owner_id)
    return [to_model_response(m, include_provider=True) for m in models]


@router.put("/{model_id}", response_model=ModelResponse)
async def update_model(
    model_id: int,
    request: ModelFlagsUpdate,
    db: Session = Depends(get_db),
    service: ModelService = Depends(get_model_service)
):
    """Update model flags.

    Setting is_default clears the previous default of the same provider.
    """
    try:
        model = service.update_model_flags(
            db,
            model_id,
            is_saved=request.is_saved,
            is_active=request.is_active,
            is_default=request.is_default
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update model: {str(e)}")

    if not model:
        raise HTTPException(status_code=404, detail=f"Model {model_id} not found")
    return to_model_response(model)


@router.post("/{model_id}/chat", response_model=ChatResponse)
async def chat_completion(
    model_id: int,
    request: ChatRequest,
    db: Session = Depends(get_db),
    service: ModelService = Depends(get_model_service),
    gateway: ChatGateway = Depends(get_chat_gateway)
):
    """Send a chat completion request through the model's vendor."""
    model = service.get_model(db, model_id)
    if not model:
        raise HTTPException(status_code=404, detail=f"Model {model_id} not found")

    options = {
        key: value
        for key, value in (("max_tokens", request.max_tokens), ("temperature", request.temperature))
        if value is not None
    }

    try:
        result = await gateway.complete(
            model,
            [message.model_dump() for message in request.messages],
            options
        )
    except GatewayError as e:
        raise http_error_for(e, prefix="Chat completion failed: ")

    return ChatResponse(
        response=result.response,
        response_time_ms=result.latency_ms,
        model_used=model.model_id,
        provider=model.provider.provider_name,
    )
