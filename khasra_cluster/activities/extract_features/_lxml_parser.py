"""lxml-based placemark parser.

Walks the KML element tree and turns each Placemark into a Feature.
Geometry is chosen by fixed precedence (Point, then LineString, then
Polygon); placemarks whose chosen geometry is missing or empty are
dropped.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from khasra_cluster.activities.extract_features._classification import classify_layer
from khasra_cluster.activities.extract_features._constants import (
    LINESTRING_TAG,
    POINT_TAG,
    POLYGON_TAG,
)
from khasra_cluster.activities.extract_features._normalization import (
    extract_extended_data,
    find_path,
    first_descendant,
    iter_descendants,
    parse_coordinates_text,
    parse_point_text,
    text_content,
)
from khasra_cluster.core.constants import DEFAULT_PLACEMARK_NAME
from khasra_cluster.models.feature import (
    Feature,
    Geometry,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
)

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("khasra_cluster.activities.extract_features")


def parse_placemarks(root: _Element, source_name: str = "") -> list[Feature]:
    """Convert every Placemark under *root* into a Feature.

    Placemarks without a usable geometry are skipped with a warning.
    ``feature_index`` records the placemark's position in the document,
    so skipped placemarks leave gaps.
    """
    features: list[Feature] = []
    dropped = 0

    for idx, pm in enumerate(iter_descendants(root, "Placemark")):
        name = text_content(first_descendant(pm, "name")) or DEFAULT_PLACEMARK_NAME
        description = text_content(first_descendant(pm, "description"))

        geometry = resolve_geometry(pm)
        if geometry is None:
            logger.warning(
                "Skipping placemark '%s' (index %d) in %s: no Point, LineString or Polygon coordinates",
                name,
                idx,
                source_name or "KML document",
            )
            dropped += 1
            continue

        if any(math.isnan(lon) or math.isnan(lat) for lon, lat in geometry.vertices()):
            logger.warning(
                "Placemark '%s' (index %d) has malformed coordinate values (kept as NaN)",
                name,
                idx,
            )

        layer = classify_layer(name, description)
        properties = {
            "name": name,
            "description": description,
            "layer": layer.value,
            **extract_extended_data(pm),
        }

        logger.debug(
            "Parsed placemark | index=%d | name=%s | geometry=%s | layer=%s",
            idx,
            name,
            geometry.geometry_type,
            layer.value,
        )
        features.append(
            Feature(geometry=geometry, properties=properties, layer=layer, feature_index=idx)
        )

    if dropped:
        logger.info("Dropped %d placemark(s) without geometry from %s", dropped, source_name or "KML document")

    return features


def resolve_geometry(placemark_elem: _Element) -> Geometry | None:
    """Pick the placemark's geometry by precedence Point > LineString > Polygon.

    Only the highest-priority element present is considered: a Point
    with blank coordinates yields ``None`` even if a Polygon follows.
    """
    point = first_descendant(placemark_elem, POINT_TAG)
    if point is not None:
        return _parse_point(point)

    line = first_descendant(placemark_elem, LINESTRING_TAG)
    if line is not None:
        return _parse_linestring(line)

    polygon = first_descendant(placemark_elem, POLYGON_TAG)
    if polygon is not None:
        return _parse_polygon(polygon)

    return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_point(point_elem: _Element) -> PointGeometry | None:
    coordinate = parse_point_text(text_content(first_descendant(point_elem, "coordinates")))
    if coordinate is None:
        return None
    return PointGeometry(coordinates=coordinate)


def _parse_linestring(line_elem: _Element) -> LineStringGeometry | None:
    coords = parse_coordinates_text(text_content(first_descendant(line_elem, "coordinates")))
    if not coords:
        return None
    return LineStringGeometry(coordinates=coords)


def _parse_polygon(polygon_elem: _Element) -> PolygonGeometry | None:
    """Parse a Polygon's outer ring, followed by any inner (hole) rings."""
    outer = find_path(polygon_elem, "outerBoundaryIs", "LinearRing", "coordinates")
    exterior = parse_coordinates_text(text_content(outer))
    if not exterior:
        return None

    rings = [exterior]
    for inner_boundary in iter_descendants(polygon_elem, "innerBoundaryIs"):
        ring = parse_coordinates_text(
            text_content(find_path(inner_boundary, "LinearRing", "coordinates"))
        )
        if ring:
            rings.append(ring)

    return PolygonGeometry(rings=rings)
