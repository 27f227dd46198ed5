"""Data model for a parsed KMZ placemark.

A Feature represents a single placemark extracted from the KML document
inside an uploaded KMZ archive: one typed geometry (Point, LineString or
Polygon), the placemark's property bag (name, description, layer and any
ExtendedData entries), and the thematic layer assigned by the classifier.
This is the output of the extract_features activity and the input to
the select_layers and cluster_features activities.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import ClassVar

Coordinate = tuple[float, float]
"""A ``(longitude, latitude)`` pair in decimal degrees."""


class Layer(enum.Enum):
    """Thematic layer a feature is tagged into.

    Declaration order is the order the wizard lists layers in.
    """

    BUILDINGS = "Buildings"
    SETTLEMENTS = "Settlements"
    CROPS = "Crops"
    WATER = "Water"
    SLOPES = "Slopes"
    OTHER = "Other"


# ---------------------------------------------------------------------------
# Geometry variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PointGeometry:
    """A single ``(lon, lat)`` position."""

    geometry_type: ClassVar[str] = "Point"

    coordinates: Coordinate

    def vertices(self) -> list[Coordinate]:
        return [self.coordinates]

    def to_dict(self) -> dict[str, object]:
        return {"type": self.geometry_type, "coordinates": list(self.coordinates)}


@dataclass(frozen=True, slots=True)
class LineStringGeometry:
    """An ordered sequence of ``(lon, lat)`` positions."""

    geometry_type: ClassVar[str] = "LineString"

    coordinates: list[Coordinate] = field(default_factory=list)

    def vertices(self) -> list[Coordinate]:
        return list(self.coordinates)

    def to_dict(self) -> dict[str, object]:
        return {"type": self.geometry_type, "coordinates": [list(c) for c in self.coordinates]}


@dataclass(frozen=True, slots=True)
class PolygonGeometry:
    """A polygon as a list of rings; ring 0 is the outer boundary.

    Ring closure is neither enforced nor assumed: a ring may or may not
    repeat its first position as the last.
    """

    geometry_type: ClassVar[str] = "Polygon"

    rings: list[list[Coordinate]] = field(default_factory=list)

    @property
    def outer_ring(self) -> list[Coordinate]:
        """The outer boundary ring, or an empty list if there are no rings."""
        return self.rings[0] if self.rings else []

    def vertices(self) -> list[Coordinate]:
        return list(self.outer_ring)

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.geometry_type,
            "coordinates": [[list(c) for c in ring] for ring in self.rings],
        }


Geometry = PointGeometry | LineStringGeometry | PolygonGeometry


# ---------------------------------------------------------------------------
# Feature
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Feature:
    """A single placemark extracted from a KMZ archive.

    Attributes:
        geometry: The placemark's geometry. Never ``None`` for features
            returned by the extractor.
        properties: Column name → string value. Always contains ``name``,
            ``description`` and ``layer``, followed by ExtendedData entries
            in document order.
        layer: Thematic layer assigned by the text classifier.
        feature_index: Zero-based index of the placemark within the KML
            document (counting placemarks that were later dropped).
    """

    geometry: Geometry
    properties: dict[str, str] = field(default_factory=dict)
    layer: Layer = Layer.OTHER
    feature_index: int = 0

    @property
    def name(self) -> str:
        """Value of the ``name`` property (``""`` when absent)."""
        return self.properties.get("name", "")

    @property
    def geometry_type(self) -> str:
        return self.geometry.geometry_type

    def to_dict(self) -> dict[str, object]:
        """Serialise to a GeoJSON-style Feature dict."""
        return {
            "type": "Feature",
            "geometry": self.geometry.to_dict(),
            "properties": dict(self.properties),
            "layer": self.layer.value,
            "feature_index": self.feature_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Feature:
        """Deserialise from a GeoJSON-style Feature dict.

        ``layer`` falls back to ``properties["layer"]`` and then to
        ``Other``. ``null`` coordinate values (how NaN survives a JSON
        round trip) are restored as NaN.

        Raises:
            TypeError: If field values have unexpected types.
            ValueError: If the geometry type or layer name is unknown.
            OverflowError: If a number is too large for a float.
        """
        geometry_raw = data.get("geometry")
        if not isinstance(geometry_raw, dict):
            msg = f"geometry must be a dict, got {type(geometry_raw).__name__}"
            raise TypeError(msg)

        properties_raw = data.get("properties", {})
        if not isinstance(properties_raw, dict):
            msg = f"properties must be a dict, got {type(properties_raw).__name__}"
            raise TypeError(msg)
        properties = {str(k): "" if v is None else str(v) for k, v in properties_raw.items()}

        layer_raw = data.get("layer") or properties.get("layer") or Layer.OTHER.value

        return cls(
            geometry=geometry_from_dict(geometry_raw),
            properties=properties,
            layer=Layer(str(layer_raw)),
            feature_index=int(data.get("feature_index", 0)),  # type: ignore[arg-type]
        )


def geometry_from_dict(data: dict[str, object]) -> Geometry:
    """Build a geometry variant from a GeoJSON-style geometry dict.

    Raises:
        TypeError: If ``coordinates`` is not a list.
        ValueError: If ``type`` is not Point, LineString or Polygon.
    """
    geometry_type = data.get("type")
    coordinates = data.get("coordinates", [])
    if not isinstance(coordinates, list | tuple):
        msg = f"coordinates must be a list, got {type(coordinates).__name__}"
        raise TypeError(msg)

    if geometry_type == PointGeometry.geometry_type:
        return PointGeometry(coordinates=_to_coordinate(coordinates))
    if geometry_type == LineStringGeometry.geometry_type:
        return LineStringGeometry(coordinates=[_to_coordinate(c) for c in coordinates])
    if geometry_type == PolygonGeometry.geometry_type:
        return PolygonGeometry(rings=[[_to_coordinate(c) for c in ring] for ring in coordinates])

    msg = f"Unsupported geometry type: {geometry_type!r}"
    raise ValueError(msg)


def _to_coordinate(raw: object) -> Coordinate:
    if not isinstance(raw, list | tuple) or len(raw) < 2:
        msg = f"coordinate must be a [lon, lat] pair, got {raw!r}"
        raise TypeError(msg)
    lon, lat = raw[0], raw[1]
    return (
        math.nan if lon is None else float(lon),
        math.nan if lat is None else float(lat),
    )
