"""Model database model."""

from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Date,
    DateTime,
    Numeric,
    JSON,
    ForeignKey,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship, backref
from provider_gateway.database.database import Base


class Model(Base):
    """Model for storing an AI vendor's model catalog entry plus user-set flags."""

    __tablename__ = "ai_models"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("ai_providers.id", ondelete="CASCADE"), nullable=False)
    model_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    family = Column(String(100), nullable=True)
    context_window = Column(Integer, nullable=True)
    max_tokens = Column(Integer, nullable=True)
    input_cost = Column(Numeric(10, 6, asdecimal=False), nullable=True)
    output_cost = Column(Numeric(10, 6, asdecimal=False), nullable=True)
    capabilities = Column(JSON, nullable=True)
    is_deprecated = Column(Boolean, nullable=False, default=False)
    is_saved = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=False)
    is_default = Column(Boolean, nullable=False, default=False)
    release_date = Column(Date, nullable=True)
    model_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship
    provider = relationship("Provider", backref=backref("models", cascade="all, delete-orphan", passive_deletes=True))

    # Constraints
    __table_args__ = (
        UniqueConstraint("provider_id", "model_id", name="uq_provider_model_id"),
        Index("ix_ai_models_provider_active", "provider_id", "is_active"),
        Index("ix_ai_models_provider_default", "provider_id", "is_default"),
    )

    @property
    def full_identifier(self) -> str:
        """Vendor-qualified identifier, e.g. ``openai:gpt-4``."""
        return f"{self.provider.provider_name}:{self.model_id}"

    @property
    def cost_per_1k_tokens(self) -> dict:
        return {
            "input": self.input_cost * 1000 if self.input_cost else None,
            "output": self.output_cost * 1000 if self.output_cost else None,
        }
