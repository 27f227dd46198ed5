"""Shared helper functions for map-centering data.

The upload and layer steps centre their map on the midpoint of the
dataset's extent. These helpers derive that extent from feature
vertices: a Point's coordinate, every LineString vertex, and the
outer ring of a Polygon.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from khasra_cluster.models.feature import Coordinate, Feature


def collect_coordinates(features: Iterable[Feature]) -> list[Coordinate]:
    """All vertices of *features*, in feature order."""
    return [coord for feature in features for coord in feature.geometry.vertices()]


def compute_bounds(features: Iterable[Feature]) -> tuple[float, float, float, float] | None:
    """Extent of *features* as ``(min_lon, min_lat, max_lon, max_lat)``.

    Returns:
        ``None`` when there are no vertices.
    """
    coords = collect_coordinates(features)
    if not coords:
        return None
    lons = [c[0] for c in coords]
    lats = [c[1] for c in coords]
    return (min(lons), min(lats), max(lons), max(lats))


def compute_map_center(features: Iterable[Feature]) -> tuple[float, float] | None:
    """Midpoint of the extent as ``(lat, lon)``, the order map widgets expect."""
    bounds = compute_bounds(features)
    if bounds is None:
        return None
    min_lon, min_lat, max_lon, max_lat = bounds
    return ((min_lat + max_lat) / 2, (min_lon + max_lon) / 2)
