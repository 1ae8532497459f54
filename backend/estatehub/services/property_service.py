"""Listing creation and SEO maintenance."""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select

from estatehub.config import settings
from estatehub.database import utcnow
from estatehub.errors import NotFoundError, ValidationError
from estatehub.models.property import (
    VALID_CREATED_BY_TYPES,
    Property,
    PropertyImage,
    PropertySeo,
    PropertyVerification,
)
from estatehub.schemas.property import PropertyCreate, PropertySeoUpdate
from estatehub.services.gateway import PersistenceGateway
from estatehub.services.geo import boundary_to_geojson, geojson_area_sq_m
from estatehub.services.seo import default_seo_fields, generate_unique_slug, listing_schema, slugify

logger = logging.getLogger(__name__)

PENDING_VERIFICATION_MESSAGE = "Verification pending"


@dataclass(frozen=True)
class Creator:
    """Who is submitting a listing: ``kind`` is ``ADMIN`` or ``USER``."""

    kind: str
    id: uuid.UUID


class PropertyService:
    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway

    async def create_property(self, body: PropertyCreate, creator: Creator) -> Property:
        """Insert a listing with its SEO, verification and image rows in one transaction."""
        if creator.kind not in VALID_CREATED_BY_TYPES:
            raise ValidationError(f"Unknown creator type {creator.kind!r}")

        data = body.model_dump(exclude={"seo", "images", "boundary", "calculated_area"})
        boundary = [point.model_dump() for point in body.boundary] if body.boundary else None
        geo_json = boundary_to_geojson(boundary) if boundary else None
        calculated_area = body.calculated_area
        if calculated_area is None and geo_json is not None:
            calculated_area = Decimal(str(round(geojson_area_sq_m(geo_json), 2)))

        seo_input = body.seo
        async with self.gateway.transaction("property creation") as session:
            if seo_input is not None and seo_input.slug:
                slug = slugify(seo_input.slug)
                if not slug or await self.gateway.slug_exists(slug):
                    raise ValidationError(f"Slug {seo_input.slug!r} is invalid or already in use")
            else:
                slug = await generate_unique_slug(self.gateway, body.title)

            prop = Property(
                **data,
                boundary=boundary,
                geo_json=geo_json,
                calculated_area=calculated_area,
                created_by_type=creator.kind,
                created_by_admin_id=creator.id if creator.kind == "ADMIN" else None,
                created_by_user_id=creator.id if creator.kind == "USER" else None,
                approval_status="PENDING",
            )
            session.add(prop)
            await session.flush()

            defaults = default_seo_fields(
                brand=settings.app_name,
                title=body.title,
                property_type=body.property_type,
                city=body.city,
                district=body.district,
            )
            schema_document = seo_input.schema_document if seo_input is not None else None
            if schema_document is None:
                schema_document = listing_schema(
                    title=body.title,
                    description=body.description,
                    price=body.price,
                    city=body.city,
                    state=body.state,
                    country=body.country,
                    url=f"{settings.frontend_url.rstrip('/')}/property/{slug}",
                    image_urls=[image.image_url for image in body.images],
                )
            session.add(
                PropertySeo(
                    property_id=prop.id,
                    slug=slug,
                    seo_title=(seo_input.seo_title if seo_input else None) or defaults["seo_title"],
                    seo_description=(seo_input.seo_description if seo_input else None) or defaults["seo_description"],
                    seo_keywords=(seo_input.seo_keywords if seo_input else None) or defaults["seo_keywords"],
                    schema=schema_document,
                )
            )
            session.add(
                PropertyVerification(
                    property_id=prop.id,
                    is_verified=False,
                    verification_message=PENDING_VERIFICATION_MESSAGE,
                )
            )

            has_main = any(image.is_main for image in body.images)
            for position, image in enumerate(body.images):
                session.add(
                    PropertyImage(
                        property_id=prop.id,
                        image_url=image.image_url,
                        image_type=image.image_type,
                        caption=image.caption,
                        alt_text=image.alt_text or body.title,
                        sort_order=position,
                        is_main=image.is_main if has_main else position == 0,
                        variants=image.variants.model_dump() if image.variants else None,
                    )
                )
            await session.flush()

        logger.info("Property %s created by %s %s (slug=%s)", prop.id, creator.kind.lower(), creator.id, slug)
        created = await self.gateway.get_property(prop.id, refresh=True)
        return created if created is not None else prop

    async def update_seo(self, property_id: uuid.UUID, body: PropertySeoUpdate) -> PropertySeo:
        """Apply only the explicitly provided SEO fields."""
        changes = body.model_dump(exclude_unset=True)
        async with self.gateway.transaction("SEO update") as session:
            result = await session.execute(select(PropertySeo).where(PropertySeo.property_id == property_id))
            seo = result.scalar_one_or_none()
            if seo is None:
                raise NotFoundError("Property SEO not found")

            if "slug" in changes and changes["slug"] is not None:
                slug = slugify(changes.pop("slug"))
                if not slug:
                    raise ValidationError("Slug must contain letters or digits")
                if slug != seo.slug and await self.gateway.slug_exists(slug):
                    raise ValidationError(f"Slug {slug!r} is already in use")
                seo.slug = slug
            changes.pop("slug", None)
            if "schema_document" in changes:
                seo.schema = changes.pop("schema_document")
            for field_name, value in changes.items():
                setattr(seo, field_name, value)
            seo.updated_at = utcnow()

        logger.info("SEO updated for property %s", property_id)
        return seo
