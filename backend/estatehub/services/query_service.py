"""Read side for listings: filtered, searchable, paginated property pages and the map view.

A listing is only ever returned together with its SEO row and its
verification row (inner joins). Listings missing either are invisible here,
even to admins.
"""

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from sqlalchemy import distinct, exists, func, or_, select
from sqlalchemy.sql import Select

from estatehub.database import utcnow
from estatehub.errors import NotFoundError, ValidationError
from estatehub.models.property import (
    VALID_APPROVAL_STATUSES,
    Property,
    PropertyImage,
    PropertySeo,
    PropertyVerification,
)
from estatehub.models.saved_property import SavedProperty
from estatehub.models.user import PlatformUser
from estatehub.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
FETCH_FAILURE = "fetch properties"

# Columns matched (case-insensitively, substring) by the free-text search.
SEARCH_COLUMNS = (
    Property.title,
    Property.city,
    Property.district,
    Property.state,
    Property.address,
    Property.owner_name,
    Property.owner_phone,
    Property.khasra_number,
    Property.murabba_number,
    Property.khewat_number,
    PlatformUser.first_name,
    PlatformUser.last_name,
    PlatformUser.email,
)


@dataclass(frozen=True)
class Bounds:
    north: float
    south: float
    east: float
    west: float


@dataclass
class PropertyFilter:
    page: int = 1
    limit: int = 10
    approval_status: str | None = None
    search_term: str | None = None
    created_by_admin_id: uuid.UUID | None = None
    created_by_user_id: uuid.UUID | None = None
    bounds: Bounds | None = None


@dataclass
class PropertyRow:
    property: Property
    seo: PropertySeo
    verification: PropertyVerification
    images: list[PropertyImage] = field(default_factory=list)


@dataclass
class PageMeta:
    total: int
    page: int
    limit: int
    total_pages: int


@dataclass
class PropertyPage:
    data: list[PropertyRow]
    meta: PageMeta


@dataclass
class MapPropertyRow:
    id: uuid.UUID
    title: str
    property_type: str
    price: Decimal
    area: Decimal
    area_unit: str
    city: str | None
    district: str | None
    state: str | None
    latitude: float | None
    longitude: float | None
    geo_json: dict | None
    slug: str
    main_image_url: str | None
    is_featured: bool
    is_verified: bool
    owner_name: str | None
    created_at: datetime
    days_on_market: int
    saved: bool | None = None


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def days_since(moment: datetime, now: datetime | None = None) -> int:
    """Whole days elapsed since ``moment``, never negative."""
    return max(((now or utcnow()) - moment).days, 0)


def _row(prop: Property) -> PropertyRow:
    return PropertyRow(property=prop, seo=prop.seo, verification=prop.verification, images=list(prop.images))


def _main_image_url(prop: Property) -> str | None:
    if not prop.images:
        return None
    main = next((image for image in prop.images if image.is_main), prop.images[0])
    return main.image_url


class PropertyQueryService:
    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway

    # ------------------------------------------------------------------
    # Query construction
    # ------------------------------------------------------------------

    @staticmethod
    def _joined(stmt: Select) -> Select:
        return (
            stmt.join(PropertySeo, PropertySeo.property_id == Property.id)
            .join(PropertyVerification, PropertyVerification.property_id == Property.id)
            .outerjoin(PlatformUser, PlatformUser.id == Property.created_by_user_id)
        )

    @staticmethod
    def _predicates(filters: PropertyFilter) -> list:
        predicates = []
        if filters.approval_status is not None:
            predicates.append(Property.approval_status == filters.approval_status)
        if filters.created_by_admin_id is not None:
            predicates.append(Property.created_by_admin_id == filters.created_by_admin_id)
        if filters.created_by_user_id is not None:
            predicates.append(Property.created_by_user_id == filters.created_by_user_id)
        term = (filters.search_term or "").strip()
        if term:
            pattern = f"%{escape_like(term)}%"
            predicates.append(or_(*(column.ilike(pattern, escape="\\") for column in SEARCH_COLUMNS)))
        if filters.bounds is not None:
            predicates.extend(_bounds_predicates(filters.bounds))
        return predicates

    @staticmethod
    def _validate(filters: PropertyFilter) -> None:
        if filters.page < 1:
            raise ValidationError("page must be 1 or greater")
        if not 1 <= filters.limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if filters.approval_status is not None and filters.approval_status not in VALID_APPROVAL_STATUSES:
            raise ValidationError(f"Unknown approval status {filters.approval_status!r}")

    # ------------------------------------------------------------------
    # Listing pages
    # ------------------------------------------------------------------

    async def list_properties(self, filters: PropertyFilter) -> PropertyPage:
        """One page of listings, newest first, with total and page count."""
        self._validate(filters)
        predicates = self._predicates(filters)

        count_stmt = self._joined(select(func.count(distinct(Property.id))).select_from(Property)).where(*predicates)
        total = (await self.gateway.execute(count_stmt, FETCH_FAILURE)).scalar_one()

        items_stmt = (
            self._joined(select(Property))
            .where(*predicates)
            .order_by(Property.created_at.desc(), Property.id.desc())
            .offset((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        )
        result = await self.gateway.execute(items_stmt, FETCH_FAILURE)
        rows = [_row(prop) for prop in result.scalars().unique().all()]

        logger.debug("Listed %d of %d properties (page %d)", len(rows), total, filters.page)
        return PropertyPage(
            data=rows,
            meta=PageMeta(
                total=total,
                page=filters.page,
                limit=filters.limit,
                total_pages=math.ceil(total / filters.limit),
            ),
        )

    async def list_approved(self, page: int = 1, limit: int = 10, search_term: str | None = None) -> PropertyPage:
        return await self.list_properties(
            PropertyFilter(page=page, limit=limit, search_term=search_term, approval_status="APPROVED")
        )

    async def list_by_approval_status(
        self, approval_status: str | None, page: int = 1, limit: int = 10, search_term: str | None = None
    ) -> PropertyPage:
        return await self.list_properties(
            PropertyFilter(page=page, limit=limit, search_term=search_term, approval_status=approval_status)
        )

    async def list_admin_properties(
        self, admin_id: uuid.UUID, page: int = 1, limit: int = 10, search_term: str | None = None
    ) -> PropertyPage:
        """Listings posted by one admin, in any approval state."""
        return await self.list_properties(
            PropertyFilter(page=page, limit=limit, search_term=search_term, created_by_admin_id=admin_id)
        )

    async def list_user_properties(
        self, user_id: uuid.UUID, page: int = 1, limit: int = 10, approval_status: str | None = None
    ) -> PropertyPage:
        return await self.list_properties(
            PropertyFilter(page=page, limit=limit, approval_status=approval_status, created_by_user_id=user_id)
        )

    async def top_properties(self, limit: int = 6) -> list[PropertyRow]:
        """Most recent approved listings."""
        page = await self.list_properties(PropertyFilter(page=1, limit=limit, approval_status="APPROVED"))
        return page.data

    async def get_property(self, property_id: uuid.UUID) -> PropertyRow:
        stmt = self._joined(select(Property)).where(Property.id == property_id)
        result = await self.gateway.execute(stmt, FETCH_FAILURE)
        prop = result.scalars().unique().one_or_none()
        if prop is None:
            raise NotFoundError("Property not found")
        return _row(prop)

    # ------------------------------------------------------------------
    # Map view
    # ------------------------------------------------------------------

    async def map_properties(
        self,
        user_id: uuid.UUID | None = None,
        bounds: Bounds | None = None,
        limit: int = 1000,
    ) -> list[MapPropertyRow]:
        """Approved listings for the map, with days on market and (for a signed-in user) a saved flag."""
        columns: list = [Property]
        if user_id is not None:
            saved_flag = (
                exists()
                .where(
                    SavedProperty.property_id == Property.id,
                    SavedProperty.user_id == user_id,
                    SavedProperty.is_active.is_(True),
                )
                .label("saved")
            )
            columns.append(saved_flag)

        predicates = [Property.approval_status == "APPROVED"]
        if bounds is not None:
            predicates.extend(_bounds_predicates(bounds))

        stmt = (
            self._joined(select(*columns))
            .where(*predicates)
            .order_by(Property.created_at.desc(), Property.id.desc())
            .limit(limit)
        )
        result = await self.gateway.execute(stmt, FETCH_FAILURE)

        now = utcnow()
        items = []
        for row in result.unique().all():
            prop: Property = row[0]
            owner = prop.created_by_user
            owner_name = prop.owner_name
            if owner_name is None and owner is not None:
                owner_name = " ".join(part for part in (owner.first_name, owner.last_name) if part) or None
            items.append(
                MapPropertyRow(
                    id=prop.id,
                    title=prop.title,
                    property_type=prop.property_type,
                    price=prop.price,
                    area=prop.area,
                    area_unit=prop.area_unit,
                    city=prop.city,
                    district=prop.district,
                    state=prop.state,
                    latitude=prop.latitude,
                    longitude=prop.longitude,
                    geo_json=prop.geo_json,
                    slug=prop.seo.slug,
                    main_image_url=_main_image_url(prop),
                    is_featured=prop.is_featured,
                    is_verified=prop.verification.is_verified,
                    owner_name=owner_name,
                    created_at=prop.created_at,
                    days_on_market=days_since(prop.created_at, now),
                    saved=bool(row[1]) if user_id is not None else None,
                )
            )
        return items


def _bounds_predicates(bounds: Bounds) -> list:
    predicates = [
        Property.latitude.is_not(None),
        Property.longitude.is_not(None),
        Property.latitude.between(bounds.south, bounds.north),
    ]
    if bounds.west <= bounds.east:
        predicates.append(Property.longitude.between(bounds.west, bounds.east))
    else:
        # Viewport crosses the antimeridian.
        predicates.append(or_(Property.longitude >= bounds.west, Property.longitude <= bounds.east))
    return predicates
