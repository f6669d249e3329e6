"""Database configuration and session management."""

import os
import logging
from sqlalchemy import create_engine, event, inspect
from sqlalchemy.orm import declarative_base, sessionmaker

from provider_gateway.config import settings

logger = logging.getLogger(__name__)

# Create data directory if it doesn't exist
if settings.database_url.startswith("sqlite:///./data/"):
    os.makedirs("data", exist_ok=True)

# Create SQLAlchemy engine
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
)

if "sqlite" in settings.database_url:
    # Model rows cascade with their provider only when SQLite enforces foreign keys
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create declarative base for models
Base = declarative_base()


def get_db():
    """Get database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables.

    Creates all tables defined in the models if they don't exist.
    This function is idempotent and safe to call multiple times.
    """
    # Import all models to ensure they are registered with Base
    from provider_gateway.models import Provider, Model  # noqa: F401

    logger.info("Initializing database...")

    inspector = inspect(engine)
    existing_tables = inspector.get_table_names()

    if not existing_tables:
        logger.info("No existing tables found. Creating all tables...")
    else:
        logger.info(f"Found existing tables: {existing_tables}")

    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)
    created_tables = inspector.get_table_names()
    logger.info(f"Database initialized with tables: {created_tables}")

