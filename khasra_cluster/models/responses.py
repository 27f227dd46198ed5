"""Pydantic response schemas for the HTTP endpoints.

Responses are serialised with ``model_dump_json()`` so that NaN
coordinates (from malformed coordinate tokens) are emitted as JSON
``null`` instead of the non-standard ``NaN`` literal.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from khasra_cluster.models.cluster import Cluster, ClusterSummary
from khasra_cluster.models.extraction import ExtractionResult


class ExtractionResponse(BaseModel):
    """Body of ``POST /api/features``.

    Attributes:
        features: GeoJSON-style feature dicts.
        columns: Sorted property-column names.
        default_id_column: Suggested identifier column.
        source_document: Archive member that was parsed.
        layer_counts: Feature count per layer, in wizard order.
        map_center: ``[lat, lng]`` midpoint of the dataset extent, or null.
        preview: First rows of the property table.
    """

    features: list[dict[str, Any]] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    default_id_column: str = "name"
    source_document: str = ""
    layer_counts: dict[str, int] = Field(default_factory=dict)
    map_center: list[float] | None = None
    preview: list[dict[str, str]] = Field(default_factory=list)

    @classmethod
    def from_result(
        cls,
        result: ExtractionResult,
        *,
        layer_counts: dict[str, int],
        map_center: tuple[float, float] | None,
        preview_count: int,
    ) -> ExtractionResponse:
        return cls(
            features=[f.to_dict() for f in result.features],
            columns=list(result.columns),
            default_id_column=result.default_id_column,
            source_document=result.source_document,
            layer_counts=layer_counts,
            map_center=list(map_center) if map_center is not None else None,
            preview=result.preview_rows(preview_count),
        )


class LayerSelectionResponse(BaseModel):
    """Body of ``POST /api/layers``."""

    features: list[dict[str, Any]] = Field(default_factory=list)
    layers: list[str] = Field(default_factory=list)
    layer_counts: dict[str, int] = Field(default_factory=dict)
    map_center: list[float] | None = None


class ClusterSummaryModel(BaseModel):
    """Summary section of a clustering response."""

    total_clusters: int = 0
    total_features: int = 0
    average_cluster_size: float = 0.0
    largest_cluster_size: int = 0
    threshold: float = 0.0


class ClusteringResponse(BaseModel):
    """Body of ``POST /api/clusters``."""

    clusters: list[dict[str, Any]] = Field(default_factory=list)
    summary: ClusterSummaryModel = Field(default_factory=ClusterSummaryModel)

    @classmethod
    def from_clusters(cls, clusters: list[Cluster], summary: ClusterSummary) -> ClusteringResponse:
        return cls(
            clusters=[c.to_dict() for c in clusters],
            summary=ClusterSummaryModel(**summary.to_dict()),
        )


class ErrorResponse(BaseModel):
    """Body of any 4xx response; mirrors ``KhasraError.to_error_dict()``."""

    category: str
    code: str
    stage: str
    message: str
    correlation_id: str = ""
