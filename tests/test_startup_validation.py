"""Tests for application startup validation."""

import pytest
from unittest.mock import patch
from cryptography.fernet import Fernet
from sqlalchemy import inspect

from provider_gateway.config import settings
from provider_gateway.database.database import engine
from provider_gateway.main import startup_event


@pytest.mark.asyncio
async def test_app_starts_with_valid_encryption_key():
    """Test that startup succeeds and creates the tables with a valid key."""
    with patch.object(settings, "encryption_key", Fernet.generate_key().decode()):
        await startup_event()

    tables = inspect(engine).get_table_names()
    assert "ai_providers" in tables
    assert "ai_models" in tables


@pytest.mark.asyncio
async def test_app_fails_without_encryption_key():
    """Test that application fails to start without encryption key."""
    with patch.object(settings, "encryption_key", None):
        with pytest.raises(SystemExit):
            await startup_event()


@pytest.mark.asyncio
async def test_app_fails_with_invalid_encryption_key():
    """Test that application fails to start with a malformed key."""
    with patch.object(settings, "encryption_key", "invalid-key-format"):
        with pytest.raises(SystemExit):
            await startup_event()
