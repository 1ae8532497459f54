"""Property model and its one-to-one / one-to-many satellites (SEO, verification, images)."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from estatehub.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

VALID_CREATED_BY_TYPES = {"ADMIN", "USER"}

# FLAGGED only appears in legacy rows; no workflow operation produces it.
VALID_APPROVAL_STATUSES = {"PENDING", "APPROVED", "REJECTED", "FLAGGED"}


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A land or building listing submitted by an admin or a platform user."""

    __tablename__ = "properties"

    # Listing
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    property_type: Mapped[str] = mapped_column(String(30), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    price_per_unit: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), default=None)
    area: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    area_unit: Mapped[str] = mapped_column(String(20), nullable=False)

    # Land records
    khasra_number: Mapped[str | None] = mapped_column(String(100), default=None)
    murabba_number: Mapped[str | None] = mapped_column(String(100), default=None)
    khewat_number: Mapped[str | None] = mapped_column(String(100), default=None)

    # Address
    address: Mapped[str | None] = mapped_column(Text, default=None)
    city: Mapped[str | None] = mapped_column(String(100), default=None, index=True)
    district: Mapped[str | None] = mapped_column(String(100), default=None)
    state: Mapped[str | None] = mapped_column(String(100), default=None, index=True)
    country: Mapped[str] = mapped_column(String(100), default="India")
    pin_code: Mapped[str | None] = mapped_column(String(10), default=None)
    location: Mapped[dict | None] = mapped_column(JSON, default=None)  # free-form {name, address, placeId}

    # Geometry: center point, ordered boundary [{lat, lng}], derived GeoJSON polygon
    latitude: Mapped[float | None] = mapped_column(Float, default=None)
    longitude: Mapped[float | None] = mapped_column(Float, default=None)
    boundary: Mapped[list | None] = mapped_column(JSON, default=None)
    geo_json: Mapped[dict | None] = mapped_column(JSON, default=None)
    calculated_area: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), default=None)

    # Contact
    listing_as: Mapped[str] = mapped_column(String(10), default="OWNER")
    owner_name: Mapped[str | None] = mapped_column(String(255), default=None)
    owner_phone: Mapped[str | None] = mapped_column(String(20), default=None)
    owner_whatsapp: Mapped[str | None] = mapped_column(String(20), default=None)

    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Provenance: exactly one of the two creator ids is set
    created_by_type: Mapped[str] = mapped_column(String(10), nullable=False)
    created_by_admin_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"), default=None, index=True
    )
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("platform_users.id", ondelete="SET NULL"), default=None, index=True
    )

    # Approval state
    approval_status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False, index=True)
    approval_message: Mapped[str | None] = mapped_column(Text, default=None)
    approved_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"), default=None
    )
    approved_at: Mapped[datetime | None] = mapped_column(default=None)
    rejection_reason: Mapped[str | None] = mapped_column(Text, default=None)
    rejected_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"), default=None
    )
    rejected_at: Mapped[datetime | None] = mapped_column(default=None)
    admin_notes: Mapped[str | None] = mapped_column(Text, default=None)
    last_reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"), default=None
    )
    last_reviewed_at: Mapped[datetime | None] = mapped_column(default=None)

    # Relationships
    seo: Mapped["PropertySeo | None"] = relationship(
        back_populates="property", uselist=False, lazy="selectin", cascade="all, delete-orphan"
    )
    verification: Mapped["PropertyVerification | None"] = relationship(
        back_populates="property", uselist=False, lazy="selectin", cascade="all, delete-orphan"
    )
    images: Mapped[list["PropertyImage"]] = relationship(
        back_populates="property",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="PropertyImage.sort_order",
    )
    created_by_user: Mapped["PlatformUser | None"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title!r}, status={self.approval_status!r})>"


class PropertySeo(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Search-engine metadata; a listing without one is never shown."""

    __tablename__ = "property_seo"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    seo_title: Mapped[str | None] = mapped_column(String(255), default=None)
    seo_description: Mapped[str | None] = mapped_column(Text, default=None)
    seo_keywords: Mapped[str | None] = mapped_column(Text, default=None)
    schema: Mapped[dict | None] = mapped_column(JSON, default=None)

    property: Mapped["Property"] = relationship(back_populates="seo")

    def __repr__(self) -> str:
        return f"<PropertySeo(property_id={self.property_id}, slug={self.slug!r})>"


class PropertyVerification(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Authenticity flag set by an admin. At most one row per property."""

    __tablename__ = "property_verification"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verification_message: Mapped[str | None] = mapped_column(Text, default=None)
    verification_notes: Mapped[str | None] = mapped_column(Text, default=None)
    verified_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"), default=None
    )
    verified_at: Mapped[datetime | None] = mapped_column(default=None)

    property: Mapped["Property"] = relationship(back_populates="verification")

    def __repr__(self) -> str:
        return f"<PropertyVerification(property_id={self.property_id}, verified={self.is_verified})>"


class PropertyImage(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An already-uploaded image with its resized variants."""

    __tablename__ = "property_images"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    image_type: Mapped[str] = mapped_column(String(50), default="general")
    caption: Mapped[str | None] = mapped_column(Text, default=None)
    alt_text: Mapped[str | None] = mapped_column(Text, default=None)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_main: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    variants: Mapped[dict | None] = mapped_column(JSON, default=None)  # thumbnail, medium, large, original

    property: Mapped["Property"] = relationship(back_populates="images")

    def __repr__(self) -> str:
        return f"<PropertyImage(property_id={self.property_id}, sort_order={self.sort_order})>"
