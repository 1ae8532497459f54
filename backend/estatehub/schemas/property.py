"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field, model_validator

from estatehub.schemas.common import CamelModel, PaginationMeta

PROPERTY_TYPE_PATTERN = (
    "^(AGRICULTURAL|COMMERCIAL|RESIDENTIAL|INDUSTRIAL|VILLA|APARTMENT|PLOT|FARMHOUSE|WAREHOUSE|OFFICE|OTHER)$"
)
AREA_UNIT_PATTERN = "^(SQFT|SQM|ACRE|HECTARE|BIGHA|KATHA|MARLA|KANAL|GUNTA|CENT)$"
APPROVAL_STATUS_PATTERN = "^(PENDING|APPROVED|REJECTED|FLAGGED)$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BoundaryPoint(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ImageVariants(CamelModel):
    thumbnail: str | None = None
    medium: str | None = None
    large: str | None = None
    original: str | None = None


class PropertyImageInput(CamelModel):
    image_url: str = Field(..., min_length=1)
    image_type: str = Field("general", max_length=50)
    caption: str | None = None
    alt_text: str | None = None
    is_main: bool = False
    variants: ImageVariants | None = None


class PropertySeoInput(CamelModel):
    slug: str | None = Field(None, max_length=255)
    seo_title: str | None = Field(None, max_length=255)
    seo_description: str | None = None
    seo_keywords: str | None = None
    schema_document: dict | None = Field(None, alias="schema")


class PropertyCreate(CamelModel):
    """Schema for submitting a new listing. Status always starts PENDING."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    property_type: str = Field(..., pattern=PROPERTY_TYPE_PATTERN)
    price: Decimal = Field(..., ge=0)
    price_per_unit: Decimal | None = Field(None, ge=0)
    area: Decimal = Field(..., gt=0)
    area_unit: str = Field(..., pattern=AREA_UNIT_PATTERN)
    khasra_number: str | None = Field(None, max_length=100)
    murabba_number: str | None = Field(None, max_length=100)
    khewat_number: str | None = Field(None, max_length=100)
    address: str | None = None
    city: str | None = Field(None, max_length=100)
    district: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    country: str = Field("India", max_length=100)
    pin_code: str | None = Field(None, max_length=10)
    location: dict | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    boundary: list[BoundaryPoint] | None = None
    calculated_area: Decimal | None = Field(None, ge=0)
    listing_as: str = Field("OWNER", pattern="^(OWNER|AGENT)$")
    owner_name: str | None = Field(None, max_length=255)
    owner_phone: str | None = Field(None, max_length=20)
    owner_whatsapp: str | None = Field(None, max_length=20)
    is_featured: bool = False
    seo: PropertySeoInput | None = None
    images: list[PropertyImageInput] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_coordinates(self) -> "PropertyCreate":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self


class PropertySeoUpdate(CamelModel):
    """Partial SEO update. Only explicitly set fields are changed."""

    slug: str | None = Field(None, min_length=1, max_length=255)
    seo_title: str | None = Field(None, max_length=255)
    seo_description: str | None = None
    seo_keywords: str | None = None
    schema_document: dict | None = Field(None, alias="schema")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertySeoResponse(CamelModel):
    slug: str
    seo_title: str | None = None
    seo_description: str | None = None
    seo_keywords: str | None = None
    schema_document: dict | None = Field(None, alias="schema")
    updated_at: datetime


class PropertyVerificationResponse(CamelModel):
    is_verified: bool
    verification_message: str | None = None
    verification_notes: str | None = None
    verified_by: uuid.UUID | None = None
    verified_at: datetime | None = None


class PropertyImageResponse(CamelModel):
    id: uuid.UUID
    image_url: str
    image_type: str
    caption: str | None = None
    alt_text: str | None = None
    sort_order: int
    is_main: bool
    variants: dict | None = None


class PropertyResponse(CamelModel):
    """Full listing row including approval state."""

    id: uuid.UUID
    title: str
    description: str | None = None
    property_type: str
    price: Decimal
    price_per_unit: Decimal | None = None
    area: Decimal
    area_unit: str
    khasra_number: str | None = None
    murabba_number: str | None = None
    khewat_number: str | None = None
    address: str | None = None
    city: str | None = None
    district: str | None = None
    state: str | None = None
    country: str
    pin_code: str | None = None
    location: dict | None = None
    latitude: float | None = None
    longitude: float | None = None
    boundary: list | None = None
    geo_json: dict | None = None
    calculated_area: Decimal | None = None
    listing_as: str
    owner_name: str | None = None
    owner_phone: str | None = None
    owner_whatsapp: str | None = None
    is_featured: bool
    is_active: bool
    created_by_type: str
    created_by_admin_id: uuid.UUID | None = None
    created_by_user_id: uuid.UUID | None = None
    approval_status: str
    approval_message: str | None = None
    approved_by: uuid.UUID | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    rejected_by: uuid.UUID | None = None
    rejected_at: datetime | None = None
    admin_notes: str | None = None
    last_reviewed_by: uuid.UUID | None = None
    last_reviewed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class PropertyListItem(CamelModel):
    """One listing as shown in paginated results."""

    property: PropertyResponse
    seo: PropertySeoResponse
    verification: PropertyVerificationResponse
    images: list[PropertyImageResponse] = Field(default_factory=list)


class PaginatedProperties(CamelModel):
    data: list[PropertyListItem]
    meta: PaginationMeta


class MapPropertyItem(CamelModel):
    id: uuid.UUID
    title: str
    property_type: str
    price: Decimal
    area: Decimal
    area_unit: str
    city: str | None = None
    district: str | None = None
    state: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    geo_json: dict | None = None
    slug: str
    main_image_url: str | None = None
    is_featured: bool
    is_verified: bool
    owner_name: str | None = None
    created_at: datetime
    days_on_market: int
    saved: bool | None = None


class MapPropertiesResponse(CamelModel):
    data: list[MapPropertyItem]
    total: int
