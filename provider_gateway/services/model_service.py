"""Model service for managing AI model catalog rows."""

import logging
from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Query, Session

from provider_gateway.models.model import Model
from provider_gateway.models.provider import Provider
from provider_gateway.providers.base import CATALOG_FIELDS, ModelDescriptor

logger = logging.getLogger(__name__)


def _apply_filters(
    query: Query,
    active: bool = False,
    saved: bool = False,
    not_deprecated: bool = False
) -> Query:
    if active:
        query = query.filter(Model.is_active == True)  # noqa: E712
    if saved:
        query = query.filter(Model.is_saved == True)  # noqa: E712
    if not_deprecated:
        query = query.filter(Model.is_deprecated == False)  # noqa: E712
    return query


class ModelService:
    """Service for reading and updating AI model catalog rows."""

    def get_model(self, db: Session, model_id: int) -> Optional[Model]:
        """Get a model by ID.

        Args:
            db: Database session.
            model_id: Model row ID.

        Returns:
            Model instance or None if not found.
        """
        return db.query(Model).filter(Model.id == model_id).first()

    def get_models_by_provider(
        self,
        db: Session,
        provider_id: int,
        active: bool = False,
        saved: bool = False,
        not_deprecated: bool = False
    ) -> List[Model]:
        """Get models for a provider ordered by name.

        Args:
            db: Database session.
            provider_id: Provider ID.
            active: Only models with is_active set.
            saved: Only models with is_saved set.
            not_deprecated: Exclude deprecated models.

        Returns:
            List of Model instances.
        """
        query = db.query(Model).filter(Model.provider_id == provider_id)
        query = _apply_filters(query, active, saved, not_deprecated)
        return query.order_by(Model.name).all()

    def get_all_models(
        self,
        db: Session,
        owner_id: Optional[int] = None,
        active: bool = False,
        saved: bool = False,
        not_deprecated: bool = False
    ) -> List[Model]:
        """Get models across all of an owner's providers ordered by name."""
        query = db.query(Model).join(Provider, Model.provider_id == Provider.id)
        if owner_id is not None:
            query = query.filter(Provider.owner_id == owner_id)
        query = _apply_filters(query, active, saved, not_deprecated)
        return query.order_by(Model.name).all()

    def get_active_models(self, db: Session, owner_id: Optional[int] = None) -> List[Model]:
        """Get models usable for chat: active, not deprecated, on a ``ready`` provider."""
        query = db.query(Model).join(Provider, Model.provider_id == Provider.id).filter(
            Provider.status == "ready"
        )
        if owner_id is not None:
            query = query.filter(Provider.owner_id == owner_id)
        query = _apply_filters(query, active=True, not_deprecated=True)
        return query.order_by(Model.name).all()

    def upsert_model(self, db: Session, provider_id: int, descriptor: ModelDescriptor) -> Model:
        """Insert or update the row keyed by ``(provider_id, descriptor.model_id)``.

        Only catalog fields are written, so user flags (is_saved, is_active,
        is_default) on existing rows are preserved. The change is flushed,
        not committed; the caller owns the transaction.

        Args:
            db: Database session.
            provider_id: Owning provider ID.
            descriptor: Normalized catalog entry.

        Returns:
            The inserted or updated Model instance.
        """
        model = db.query(Model).filter(
            Model.provider_id == provider_id,
            Model.model_id == descriptor.model_id
        ).first()

        values = {name: getattr(descriptor, name) for name in CATALOG_FIELDS}
        if model:
            for name, value in values.items():
                setattr(model, name, value)
            model.updated_at = datetime.utcnow()
        else:
            model = Model(provider_id=provider_id, model_id=descriptor.model_id, **values)
            db.add(model)

        db.flush()
        return model

    def update_model_flags(
        self,
        db: Session,
        model_id: int,
        is_saved: Optional[bool] = None,
        is_active: Optional[bool] = None,
        is_default: Optional[bool] = None
    ) -> Optional[Model]:
        """Update user flags on a model.

        Setting ``is_default`` clears it on every other model of the same
        provider within the same commit, so a provider never has two
        defaults.

        Args:
            db: Database session.
            model_id: Model row ID.
            is_saved: New saved flag (optional).
            is_active: New active flag (optional).
            is_default: New default flag (optional).

        Returns:
            Updated Model instance or None if not found.
        """
        model = self.get_model(db, model_id)
        if not model:
            return None

        if is_default:
            db.query(Model).filter(
                Model.provider_id == model.provider_id,
                Model.id != model.id,
                Model.is_default == True  # noqa: E712
            ).update({Model.is_default: False}, synchronize_session="fetch")

        if is_saved is not None:
            model.is_saved = is_saved
        if is_active is not None:
            model.is_active = is_active
        if is_default is not None:
            model.is_default = is_default
        model.updated_at = datetime.utcnow()

        try:
            db.commit()
            db.refresh(model)
            logger.info(f"Model {model_id} flags updated")
            return model
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update model {model_id}: {e}")
            raise

    def set_default(self, db: Session, model_id: int) -> Optional[Model]:
        """Make a model its provider's default, clearing any previous default."""
        return self.update_model_flags(db, model_id, is_default=True)

    def get_default_model(self, db: Session, provider_id: int) -> Optional[Model]:
        return db.query(Model).filter(
            Model.provider_id == provider_id,
            Model.is_default == True  # noqa: E712
        ).first()
