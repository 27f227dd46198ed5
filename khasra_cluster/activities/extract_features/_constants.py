"""Shared constants for placemark extraction."""

from __future__ import annotations

# KML 2.2 namespace (documents without a namespace are accepted too)
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

# Geometry elements in selection priority order; first present wins
POINT_TAG = "Point"
LINESTRING_TAG = "LineString"
POLYGON_TAG = "Polygon"
GEOMETRY_PRECEDENCE = (POINT_TAG, LINESTRING_TAG, POLYGON_TAG)

# Joins name and description before keyword matching
CLASSIFICATION_SEPARATOR = " "
