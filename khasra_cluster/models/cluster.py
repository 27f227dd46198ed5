"""Data models for spatial clustering output.

A Cluster is one connected component of the threshold graph: features
whose centroids are chained together by pairwise distances within the
clustering threshold. Clusters are recomputed from scratch on every run;
ids carry no meaning across runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from khasra_cluster.models.feature import Coordinate, Feature


@dataclass(frozen=True, slots=True)
class ClusterMember:
    """A feature as placed in a cluster.

    Attributes:
        feature: The clustered feature.
        centroid: The feature's representative point.
        index: Position of the feature in the clustering input sequence.
    """

    feature: Feature
    centroid: Coordinate
    index: int

    def to_dict(self) -> dict[str, object]:
        return {
            "feature": self.feature.to_dict(),
            "centroid": list(self.centroid),
            "index": self.index,
        }


@dataclass(frozen=True, slots=True)
class Cluster:
    """A connected component of the threshold graph.

    Attributes:
        id: Zero-based index in emission order.
        members: Members in breadth-first visitation order.
        centroid: Unweighted mean of member centroids.
    """

    id: int
    members: list[ClusterMember] = field(default_factory=list)
    centroid: Coordinate = (0.0, 0.0)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def member_indices(self) -> list[int]:
        return [m.index for m in self.members]

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "members": [m.to_dict() for m in self.members],
            "centroid": list(self.centroid),
            "size": self.size,
        }


@dataclass(frozen=True, slots=True)
class ClusterSummary:
    """Headline figures for one clustering run.

    Attributes:
        total_clusters: Number of clusters emitted.
        total_features: Number of features submitted for clustering.
        average_cluster_size: ``total_features / total_clusters`` rounded
            to one decimal, ``0.0`` when there are no clusters.
        largest_cluster_size: Size of the biggest cluster, ``0`` when none.
        threshold: Distance threshold the run used.
    """

    total_clusters: int = 0
    total_features: int = 0
    average_cluster_size: float = 0.0
    largest_cluster_size: int = 0
    threshold: float = 0.0

    def to_dict(self) -> dict[str, object]:
        return {
            "total_clusters": self.total_clusters,
            "total_features": self.total_features,
            "average_cluster_size": self.average_cluster_size,
            "largest_cluster_size": self.largest_cluster_size,
            "threshold": self.threshold,
        }
