"""Shared test fixtures."""

import os

# Keep the module-level engine off the on-disk default before app modules import
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from cryptography.fernet import Fernet

from provider_gateway.database.database import Base
from provider_gateway.models import Provider, Model  # noqa: F401
from provider_gateway.services.encryption_service import EncryptionService
from provider_gateway.services.provider_service import ProviderService
from provider_gateway.services.model_service import ModelService


def _create_test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key constraints for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = _create_test_engine()
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def test_db(session_factory):
    """Create a test database session."""
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def encryption_service():
    """Create encryption service with a freshly generated key."""
    return EncryptionService(Fernet.generate_key().decode())


@pytest.fixture
def provider_service(encryption_service):
    return ProviderService(encryption_service)


@pytest.fixture
def model_service():
    return ModelService()


@pytest.fixture
def make_provider(test_db, provider_service):
    """Factory adding a provider row with an encrypted key."""

    def _make(provider_name="openai", owner_id=1, api_key="sk-test-key-1234567890", **kwargs):
        return provider_service.add_provider(
            test_db,
            owner_id=owner_id,
            provider_name=provider_name,
            api_key=api_key,
            **kwargs
        )

    return _make


def mock_response(status_code=200, json_data=None, json_error=None):
    """Build a stand-in for ``httpx.Response``."""
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response
