"""Saved property model: a platform user's bookmark on a listing."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from estatehub.database import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class SavedProperty(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Bookmark row. Unsaving deactivates instead of deleting."""

    __tablename__ = "saved_properties"
    __table_args__ = (UniqueConstraint("user_id", "property_id", name="uq_saved_properties_user_property"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("platform_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(50), default="general", nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    saved_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<SavedProperty(user_id={self.user_id}, property_id={self.property_id}, active={self.is_active})>"
