"""Persistence gateway: typed reads and writes over one async session.

Services never touch ``AsyncSession`` directly; they go through a gateway so
that transaction boundaries and driver-error translation live in one place.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.database import utcnow
from estatehub.errors import PersistenceError
from estatehub.models.approval import PropertyApprovalHistory, PropertyApprovalNotification
from estatehub.models.property import Property, PropertySeo, PropertyVerification
from estatehub.models.user import PlatformUser

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """Thin wrapper around an ``AsyncSession`` used by the domain services."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def transaction(self, description: str = "database operation") -> AsyncIterator[AsyncSession]:
        """Run a unit of work and commit it, or roll everything back.

        Driver errors surface as ``PersistenceError``; domain errors raised
        inside the block propagate unchanged after the rollback.
        """
        try:
            yield self.session
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Transaction failed during %s", description)
            raise PersistenceError(f"Failed to complete {description}") from exc
        except Exception:
            await self.session.rollback()
            raise

    async def execute(self, statement, description: str = "run query"):
        """Execute a read statement, translating driver errors."""
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as exc:
            logger.exception("Query failed during %s", description)
            raise PersistenceError(f"Failed to {description}") from exc

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    async def get_property(self, property_id: uuid.UUID, *, refresh: bool = False) -> Property | None:
        """Load one property with its satellites. ``refresh`` bypasses the identity map."""
        stmt = select(Property).where(Property.id == property_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.execute(stmt, "load property")
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str) -> bool:
        result = await self.execute(select(PropertySeo.id).where(PropertySeo.slug == slug), "check slug")
        return result.first() is not None

    # ------------------------------------------------------------------
    # Approval audit trail
    # ------------------------------------------------------------------

    async def insert_history(self, **fields) -> PropertyApprovalHistory:
        entry = PropertyApprovalHistory(**fields)
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def upsert_verification(
        self,
        property_id: uuid.UUID,
        *,
        admin_id: uuid.UUID,
        message: str | None,
        notes: str | None,
    ) -> PropertyVerification:
        """Mark a property verified, creating its verification row if missing."""
        result = await self.session.execute(
            select(PropertyVerification).where(PropertyVerification.property_id == property_id)
        )
        verification = result.scalar_one_or_none()
        now = utcnow()
        if verification is None:
            verification = PropertyVerification(property_id=property_id)
            self.session.add(verification)
        verification.is_verified = True
        verification.verification_message = message
        verification.verification_notes = notes
        verification.verified_by = admin_id
        verification.verified_at = now
        verification.updated_at = now
        await self.session.flush()
        return verification

    # ------------------------------------------------------------------
    # Accounts and notifications
    # ------------------------------------------------------------------

    async def get_platform_user(self, user_id: uuid.UUID) -> PlatformUser | None:
        result = await self.execute(select(PlatformUser).where(PlatformUser.id == user_id), "load user")
        return result.scalar_one_or_none()

    async def insert_notification(self, **fields) -> PropertyApprovalNotification:
        notification = PropertyApprovalNotification(**fields)
        self.session.add(notification)
        await self.session.flush()
        return notification
