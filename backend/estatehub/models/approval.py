"""Approval audit trail and the in-app notifications it produces."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from estatehub.database import Base, UUIDPrimaryKeyMixin, utcnow

NOTIFICATION_TITLE_LENGTH = 300


class PropertyApprovalHistory(UUIDPrimaryKeyMixin, Base):
    """One row per approval action. Rows are only ever inserted."""

    __tablename__ = "property_approval_history"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    admin_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    previous_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system_action: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, server_default=func.now(), index=True)

    admin: Mapped["AdminUser | None"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<PropertyApprovalHistory(property_id={self.property_id}, action={self.action!r}, "
            f"{self.previous_status}->{self.new_status})>"
        )


class PropertyApprovalNotification(UUIDPrimaryKeyMixin, Base):
    """In-app notice shown to a listing's owner after a review."""

    __tablename__ = "property_approval_notifications"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("platform_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    admin_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)  # approved, rejected, verified
    title: Mapped[str] = mapped_column(String(NOTIFICATION_TITLE_LENGTH), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(nullable=True)
    priority: Mapped[str] = mapped_column(String(20), default="normal", nullable=False)
    category: Mapped[str] = mapped_column(String(50), default="property_approval", nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, server_default=func.now(), index=True)

    def __repr__(self) -> str:
        return f"<PropertyApprovalNotification(user_id={self.user_id}, type={self.type!r}, read={self.is_read})>"
