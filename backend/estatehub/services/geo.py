"""Boundary polygon helpers: GeoJSON normalisation and area estimation."""

import math

EARTH_RADIUS_M = 6_371_008.8


def closed_ring(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    """Return the ring with its first vertex repeated at the end if it wasn't already."""
    if points and points[0] != points[-1]:
        return [*points, points[0]]
    return list(points)


def boundary_to_geojson(boundary: list[dict]) -> dict | None:
    """Convert ``[{lat, lng}, ...]`` into a GeoJSON Polygon (``[lng, lat]`` order).

    Fewer than three distinct vertices is not a polygon and yields ``None``.
    """
    points = [(float(p["lng"]), float(p["lat"])) for p in boundary]
    if len(set(points)) < 3:
        return None
    return {"type": "Polygon", "coordinates": [[list(p) for p in closed_ring(points)]]}


def ring_area_sq_m(ring: list[tuple[float, float]]) -> float:
    """Approximate area of a small ``(lng, lat)`` ring in square metres.

    Projects onto a local equirectangular plane at the ring's mean latitude,
    then applies the shoelace formula. Accurate enough for land parcels.
    """
    ring = closed_ring(ring)
    if len(ring) < 4:
        return 0.0
    mean_lat = math.radians(sum(lat for _, lat in ring[:-1]) / (len(ring) - 1))
    xs = [math.radians(lng) * EARTH_RADIUS_M * math.cos(mean_lat) for lng, _ in ring]
    ys = [math.radians(lat) * EARTH_RADIUS_M for _, lat in ring]
    twice_area = sum(xs[i] * ys[i + 1] - xs[i + 1] * ys[i] for i in range(len(ring) - 1))
    return abs(twice_area) / 2


def geojson_area_sq_m(geo_json: dict | None) -> float:
    if not geo_json or geo_json.get("type") != "Polygon":
        return 0.0
    outer = geo_json["coordinates"][0]
    return ring_area_sq_m([(float(lng), float(lat)) for lng, lat in outer])
