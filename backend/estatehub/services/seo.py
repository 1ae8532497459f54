"""Slug and search-metadata generation for listings."""

import re
from decimal import Decimal

from estatehub.services.gateway import PersistenceGateway

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASH_RUNS = re.compile(r"-+")


def slugify(text: str) -> str:
    """Lowercase, drop punctuation, hyphenate whitespace: "2 Acre Farm, Sohna!" -> "2-acre-farm-sohna"."""
    slug = _NON_SLUG_CHARS.sub("", text.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    return _DASH_RUNS.sub("-", slug).strip("-")


async def generate_unique_slug(gateway: PersistenceGateway, text: str) -> str:
    """Return ``slugify(text)``, suffixed ``-1``, ``-2``... until no listing uses it."""
    base = slugify(text) or "property"
    slug = base
    counter = 1
    while await gateway.slug_exists(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def default_seo_fields(
    *,
    brand: str,
    title: str,
    property_type: str,
    city: str | None,
    district: str | None,
) -> dict[str, str]:
    place = ", ".join(part for part in (city, district) if part)
    type_label = property_type.title()
    description = f"{type_label} property for sale"
    if place:
        description += f" in {place}"
    keywords = [property_type.lower(), (city or "").lower(), (district or "").lower(), "property for sale", brand.lower()]
    return {
        "seo_title": f"{title} | {brand}",
        "seo_description": f"{description}. Contact directly on {brand}.",
        "seo_keywords": ", ".join(keyword for keyword in keywords if keyword),
    }


def listing_schema(
    *,
    title: str,
    description: str | None,
    price: Decimal,
    city: str | None,
    state: str | None,
    country: str,
    url: str,
    image_urls: list[str],
) -> dict:
    """schema.org ``RealEstateListing`` document stored alongside the SEO row."""
    document = {
        "@context": "https://schema.org",
        "@type": "RealEstateListing",
        "name": title,
        "url": url,
        "offers": {"@type": "Offer", "price": str(price), "priceCurrency": "INR"},
        "address": {
            "@type": "PostalAddress",
            "addressLocality": city,
            "addressRegion": state,
            "addressCountry": country,
        },
    }
    if description:
        document["description"] = description
    if image_urls:
        document["image"] = image_urls
    return document
