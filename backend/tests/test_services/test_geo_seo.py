"""Tests for boundary geometry and slug/SEO helpers."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from estatehub.errors import PersistenceError
from estatehub.services.gateway import PersistenceGateway
from estatehub.services.geo import boundary_to_geojson, closed_ring, geojson_area_sq_m, ring_area_sq_m
from estatehub.services.seo import default_seo_fields, generate_unique_slug, listing_schema, slugify


class TestGeometry:
    def test_closed_ring_appends_first_vertex(self):
        assert closed_ring([(0, 0), (1, 0), (1, 1)]) == [(0, 0), (1, 0), (1, 1), (0, 0)]

    def test_closed_ring_leaves_closed_ring(self):
        ring = [(0, 0), (1, 0), (1, 1), (0, 0)]
        assert closed_ring(ring) == ring

    def test_too_few_points(self):
        assert boundary_to_geojson([{"lat": 1, "lng": 2}, {"lat": 3, "lng": 4}, {"lat": 1, "lng": 2}]) is None

    def test_geojson_uses_lng_lat_order(self):
        geo_json = boundary_to_geojson([{"lat": 10, "lng": 20}, {"lat": 10, "lng": 21}, {"lat": 11, "lng": 21}])
        assert geo_json == {
            "type": "Polygon",
            "coordinates": [[[20.0, 10.0], [21.0, 10.0], [21.0, 11.0], [20.0, 10.0]]],
        }

    def test_area_of_small_square_at_equator(self):
        # 0.001 degree is about 111.2 m at the equator
        area = ring_area_sq_m([(0.0, 0.0), (0.001, 0.0), (0.001, 0.001), (0.0, 0.001)])
        assert area == pytest.approx(12364, rel=0.01)

    def test_area_of_degenerate_input(self):
        assert ring_area_sq_m([(0.0, 0.0), (1.0, 1.0)]) == 0.0
        assert geojson_area_sq_m(None) == 0.0
        assert geojson_area_sq_m({"type": "Point", "coordinates": [0, 0]}) == 0.0


class TestSlugs:
    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("2 Acre Farm, Sohna!", "2-acre-farm-sohna"),
            ("  Villa -- with   spaces ", "villa-with-spaces"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, title: str, expected: str):
        assert slugify(title) == expected

    async def test_unique_slug_suffixes(self, db_session, make_property, test_admin):
        await make_property(creator=test_admin, slug="riverside-plot")
        await make_property(creator=test_admin, slug="riverside-plot-1")

        assert await generate_unique_slug(PersistenceGateway(db_session), "Riverside Plot") == "riverside-plot-2"

    async def test_unique_slug_fallback(self, db_session):
        assert await generate_unique_slug(PersistenceGateway(db_session), "???") == "property"


class TestSeoDefaults:
    def test_default_fields(self):
        fields = default_seo_fields(
            brand="EstateHub", title="Green Acres", property_type="AGRICULTURAL", city="Sohna", district=None
        )
        assert fields["seo_title"] == "Green Acres | EstateHub"
        assert fields["seo_description"] == "Agricultural property for sale in Sohna. Contact directly on EstateHub."
        assert fields["seo_keywords"] == "agricultural, sohna, property for sale, estatehub"

    def test_listing_schema_omits_empty_parts(self):
        document = listing_schema(
            title="Green Acres",
            description=None,
            price=2500000,
            city="Sohna",
            state="Haryana",
            country="India",
            url="https://estatehub.in/property/green-acres",
            image_urls=[],
        )
        assert "description" not in document
        assert "image" not in document
        assert document["address"]["addressRegion"] == "Haryana"


class TestGateway:
    async def test_query_failure_is_wrapped(self, db_session):
        with pytest.raises(PersistenceError, match="Failed to load ghosts") as info:
            await PersistenceGateway(db_session).execute(text("SELECT * FROM ghosts"), "load ghosts")
        assert isinstance(info.value.__cause__, OperationalError)
        assert info.value.public_message == "Internal server error"

    async def test_transaction_rolls_back_domain_errors(self, db_session, make_property, test_admin):
        prop = await make_property(creator=test_admin)
        gateway = PersistenceGateway(db_session)

        with pytest.raises(RuntimeError):
            async with gateway.transaction("rename"):
                loaded = await gateway.get_property(prop.id)
                loaded.title = "Renamed"
                await db_session.flush()
                raise RuntimeError("abort")

        reloaded = await gateway.get_property(prop.id, refresh=True)
        assert reloaded.title == "Green Acres Farm"
