"""Shared pytest fixtures for the khasra clustering test suite."""

from __future__ import annotations

import io
import zipfile

import pytest

from khasra_cluster.models.feature import (
    Feature,
    Layer,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
)

# ---------------------------------------------------------------------------
# KML / KMZ builders
# ---------------------------------------------------------------------------

KML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n<kml xmlns="http://www.opengis.net/kml/2.2"><Document>'
KML_FOOTER = "</Document></kml>"


def make_kml(*placemarks: str) -> bytes:
    """Wrap placemark snippets in a namespaced KML document."""
    return (KML_HEADER + "".join(placemarks) + KML_FOOTER).encode("utf-8")


def make_kmz(members: dict[str, bytes]) -> bytes:
    """Build a zip archive in memory; members are written in dict order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in members.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def point_feature(lon: float, lat: float, name: str = "", index: int = 0) -> Feature:
    return Feature(
        geometry=PointGeometry(coordinates=(lon, lat)),
        properties={"name": name or f"P{index}", "description": "", "layer": "Other"},
        feature_index=index,
    )


# ---------------------------------------------------------------------------
# Sample placemarks
# ---------------------------------------------------------------------------

BUILDING_POINT = """
<Placemark>
  <name>Khasra 101 building</name>
  <description>Panchayat office</description>
  <ExtendedData>
    <Data name="khasra_no"><value>101</value></Data>
    <Data name="owner"><value>Gram Sabha</value></Data>
  </ExtendedData>
  <Point><coordinates>77.2090,28.6139,0</coordinates></Point>
</Placemark>
"""

CANAL_LINE = """
<Placemark>
  <name>Irrigation canal</name>
  <description>Feeds the river</description>
  <ExtendedData>
    <Data name="length_m"><value>420</value></Data>
  </ExtendedData>
  <LineString><coordinates>77.0,28.0,0 77.2,28.2,0 77.4,28.4,0</coordinates></LineString>
</Placemark>
"""

FARM_POLYGON = """
<Placemark>
  <name>Khasra 205</name>
  <description>Wheat farm</description>
  <ExtendedData>
    <Data name="khasra_no"><value>205</value></Data>
    <Data name="area_ha"><value></value></Data>
  </ExtendedData>
  <Polygon>
    <outerBoundaryIs><LinearRing>
      <coordinates>0,0,0 2,0,0 2,2,0 0,2,0</coordinates>
    </LinearRing></outerBoundaryIs>
  </Polygon>
</Placemark>
"""

NO_GEOMETRY = """
<Placemark>
  <name>Survey note</name>
  <description>No geometry here</description>
</Placemark>
"""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_kml() -> bytes:
    """A KML document with one placemark of each geometry type plus one without geometry."""
    return make_kml(BUILDING_POINT, NO_GEOMETRY, CANAL_LINE, FARM_POLYGON)


@pytest.fixture()
def sample_kmz(sample_kml: bytes) -> bytes:
    """A KMZ archive holding ``doc.kml`` and an icon."""
    return make_kmz({"files/icon.png": b"\x89PNG", "doc.kml": sample_kml})


@pytest.fixture()
def scenario_points() -> list[Feature]:
    """Points at (0,0), (1,0) and (10,10)."""
    return [
        point_feature(0.0, 0.0, index=0),
        point_feature(1.0, 0.0, index=1),
        point_feature(10.0, 10.0, index=2),
    ]


@pytest.fixture()
def mixed_features() -> list[Feature]:
    """One feature per geometry type across three layers."""
    return [
        Feature(
            geometry=PointGeometry(coordinates=(77.0, 28.0)),
            properties={"name": "School building", "description": "", "layer": "Buildings"},
            layer=Layer.BUILDINGS,
            feature_index=0,
        ),
        Feature(
            geometry=LineStringGeometry(coordinates=[(76.0, 27.0), (78.0, 29.0)]),
            properties={"name": "River", "description": "", "layer": "Water"},
            layer=Layer.WATER,
            feature_index=1,
        ),
        Feature(
            geometry=PolygonGeometry(rings=[[(75.0, 26.0), (79.0, 26.0), (79.0, 30.0), (75.0, 30.0)]]),
            properties={"name": "Field", "description": "crop land", "layer": "Crops"},
            layer=Layer.CROPS,
            feature_index=2,
        ),
    ]
