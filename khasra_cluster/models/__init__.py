"""Data models and schemas.

Defines the data structures used throughout the wizard backend:
- Feature: Typed placemark geometry with properties and layer
- ExtractionResult: Features, column names, default identifier column
- Cluster: Connected component of the threshold graph
- Responses: Pydantic HTTP response bodies
"""

from khasra_cluster.models.cluster import Cluster, ClusterMember, ClusterSummary
from khasra_cluster.models.extraction import ExtractionResult
from khasra_cluster.models.feature import (
    Coordinate,
    Feature,
    Geometry,
    Layer,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
    geometry_from_dict,
)

__all__ = [
    "Cluster",
    "ClusterMember",
    "ClusterSummary",
    "Coordinate",
    "ExtractionResult",
    "Feature",
    "Geometry",
    "Layer",
    "LineStringGeometry",
    "PointGeometry",
    "PolygonGeometry",
    "geometry_from_dict",
]
