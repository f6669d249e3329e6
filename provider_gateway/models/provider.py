"""Provider database model."""

from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    JSON,
    Text,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from provider_gateway.database.database import Base
from provider_gateway.providers.constants import (
    PROVIDER_NAMES,
    PROVIDER_STATUSES,
    display_name_for,
    resolve_base_url,
)


def _in_clause(column: str, values) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


class Provider(Base):
    """An owner's connection to one AI vendor; the API key is stored encrypted."""

    __tablename__ = "ai_providers"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, nullable=False)
    provider_name = Column(String(50), nullable=False)
    api_key_encrypted = Column(Text, nullable=False)
    base_url = Column(String(500), nullable=True)
    region = Column(String(100), nullable=True)
    configuration = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False, default="configured")
    last_tested_at = Column(DateTime, nullable=True)
    test_result = Column(JSON, nullable=True)
    model_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Constraints
    __table_args__ = (
        UniqueConstraint("owner_id", "provider_name", name="uq_owner_provider_name"),
        CheckConstraint(_in_clause("provider_name", PROVIDER_NAMES), name="ck_provider_name"),
        CheckConstraint(_in_clause("status", PROVIDER_STATUSES), name="ck_provider_status"),
        Index("ix_ai_providers_owner_status", "owner_id", "status"),
    )

    @property
    def display_name(self) -> str:
        return display_name_for(self.provider_name)

    @property
    def effective_base_url(self) -> str:
        """Base URL override if set, otherwise the vendor default."""
        return resolve_base_url(self.provider_name, self.base_url)

    def __repr__(self) -> str:
        return f"<Provider id={self.id} provider_name={self.provider_name!r} status={self.status!r}>"
