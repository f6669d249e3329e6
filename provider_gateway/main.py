"""Main FastAPI application entry point."""

import logging

from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import List, Optional

from provider_gateway.config import settings
from provider_gateway.database.database import init_db, get_db
from provider_gateway.api.providers import router as providers_router
from provider_gateway.api.models import router as models_router
from provider_gateway.services.encryption_service import EncryptionService
from provider_gateway.models.provider import Provider
from provider_gateway.models.model import Model
from provider_gateway.providers.registry import default_registry

logger = logging.getLogger(__name__)

app = FastAPI(
    title="AI Provider Gateway",
    description="Vendor connections, model catalogs and chat completions for AI providers",
    version="0.1.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(providers_router)
app.include_router(models_router)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    encryption: str
    message: Optional[str] = None


class StatsResponse(BaseModel):
    """System statistics response."""

    providers_count: int
    ready_providers_count: int
    models_count: int
    active_models_count: int


class SupportedProvider(BaseModel):
    """A vendor the gateway can talk to."""

    name: str
    display_name: str
    implemented: bool
    catalog_source: str


@app.on_event("startup")
async def startup_event():
    """Configure logging, validate encryption and initialize the database."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    # Validate encryption service (will exit if key is invalid)
    EncryptionService()
    init_db()
    logger.info(f"AI Provider Gateway started with {len(default_registry.supported())} vendors")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "AI Provider Gateway API", "version": "0.1.0"}


@app.get("/api/health", response_model=HealthResponse)
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint.

    Checks database connectivity and encryption key validity.
    """
    health_status = {
        "status": "healthy",
        "database": "connected",
        "encryption": "valid"
    }

    try:
        db.execute(text("SELECT 1"))

        encryption_service = EncryptionService()
        test_encrypted = encryption_service.encrypt("test")
        test_decrypted = encryption_service.decrypt(test_encrypted)

        if test_decrypted != "test":
            health_status["encryption"] = "invalid"
            health_status["status"] = "unhealthy"
            health_status["message"] = "Encryption service validation failed"

        return HealthResponse(**health_status)

    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"] = "disconnected"
        health_status["message"] = str(e)
        return HealthResponse(**health_status)


@app.get("/api/stats", response_model=StatsResponse)
async def get_stats(db: Session = Depends(get_db)):
    """Get counts of providers and models."""
    try:
        return StatsResponse(
            providers_count=db.query(Provider).count(),
            ready_providers_count=db.query(Provider).filter(Provider.status == "ready").count(),
            models_count=db.query(Model).count(),
            active_models_count=db.query(Model).filter(Model.is_active == True).count(),  # noqa: E712
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get stats: {str(e)}")


@app.get("/api/supported-providers", response_model=List[SupportedProvider])
async def supported_providers():
    """List the vendors registered with the gateway."""
    result = []
    for name in default_registry.supported():
        adapter = default_registry.resolve(name)
        result.append(SupportedProvider(
            name=name,
            display_name=adapter.display_name,
            implemented=not adapter.is_stub,
            catalog_source=adapter.catalog_source,
        ))
    return result
