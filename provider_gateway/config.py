"""Application configuration."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./data/provider_gateway.db"

    # Encryption (validated at startup by EncryptionService)
    encryption_key: Optional[str] = None

    # Outbound vendor calls
    connect_timeout: float = 10.0
    request_timeout: float = 30.0
    default_max_tokens: int = 1000
    default_temperature: float = 0.7
    anthropic_version: str = "2023-06-01"

    # Application
    log_level: str = "INFO"
    app_host: str = "0.0.0.0"
    app_port: int = 8000


settings = Settings()
