"""Saved-property bookmarks for platform users."""

import logging
import uuid

from sqlalchemy import func, select

from estatehub.database import utcnow
from estatehub.errors import NotFoundError
from estatehub.models.saved_property import SavedProperty
from estatehub.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class SavedPropertyService:
    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway

    async def save_property(
        self,
        user_id: uuid.UUID,
        property_id: uuid.UUID,
        category: str = "general",
        notes: str | None = None,
    ) -> SavedProperty:
        """Bookmark a listing. Saving again reactivates and updates the bookmark."""
        async with self.gateway.transaction("save property") as session:
            if await self.gateway.get_property(property_id) is None:
                raise NotFoundError("Property not found")

            result = await session.execute(
                select(SavedProperty).where(
                    SavedProperty.user_id == user_id,
                    SavedProperty.property_id == property_id,
                )
            )
            saved = result.scalar_one_or_none()
            now = utcnow()
            if saved is None:
                saved = SavedProperty(user_id=user_id, property_id=property_id, saved_at=now)
                session.add(saved)
            elif not saved.is_active:
                saved.saved_at = now
            saved.is_active = True
            saved.category = category
            saved.notes = notes
            saved.updated_at = now
            await session.flush()

        logger.info("User %s saved property %s", user_id, property_id)
        return saved

    async def unsave_property(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """Deactivate a bookmark. Returns False when there was nothing to remove."""
        async with self.gateway.transaction("unsave property") as session:
            result = await session.execute(
                select(SavedProperty).where(
                    SavedProperty.user_id == user_id,
                    SavedProperty.property_id == property_id,
                    SavedProperty.is_active.is_(True),
                )
            )
            saved = result.scalar_one_or_none()
            if saved is None:
                return False
            saved.is_active = False
            saved.updated_at = utcnow()

        logger.info("User %s removed saved property %s", user_id, property_id)
        return True

    async def list_saved(
        self, user_id: uuid.UUID, limit: int = 50, offset: int = 0
    ) -> tuple[list[SavedProperty], int]:
        filters = [SavedProperty.user_id == user_id, SavedProperty.is_active.is_(True)]
        count_result = await self.gateway.execute(
            select(func.count()).select_from(SavedProperty).where(*filters), "count saved properties"
        )
        total = count_result.scalar_one()
        result = await self.gateway.execute(
            select(SavedProperty)
            .where(*filters)
            .order_by(SavedProperty.saved_at.desc(), SavedProperty.id.desc())
            .offset(offset)
            .limit(limit),
            "load saved properties",
        )
        return list(result.scalars().all()), total

    async def is_saved(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        result = await self.gateway.execute(
            select(SavedProperty.id).where(
                SavedProperty.user_id == user_id,
                SavedProperty.property_id == property_id,
                SavedProperty.is_active.is_(True),
            ),
            "check saved property",
        )
        return result.first() is not None
