"""Spatial clustering activity function.

Groups features into connected components of the threshold graph: two
features are linked when the plane Euclidean distance between their
centroids is within the threshold. Components are discovered by
breadth-first flood fill in input order.

Behavioural notes:
- Distances are computed directly on longitude/latitude degrees
  (no projection, no geodesic correction). The threshold uses the same
  units as the coordinates.
- Feature centroids are unweighted vertex means; for polygons only the
  outer ring is used.
- Features with no derivable centroid are left out silently.
- NaN coordinates are not filtered: a NaN centroid is never within any
  threshold, so such a feature forms its own cluster.
- Every dequeued feature triggers a full O(n) neighbour scan, giving
  O(n^2) per run. Output (ids, member order, centroids) is fully
  deterministic for a given input order and threshold.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import TYPE_CHECKING

from khasra_cluster.models.cluster import Cluster, ClusterMember, ClusterSummary

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from khasra_cluster.models.feature import Coordinate, Feature

logger = logging.getLogger("khasra_cluster.activities.cluster_features")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def cluster_features(features: Sequence[Feature], threshold: float) -> list[Cluster]:
    """Partition *features* into clusters of mutually reachable centroids.

    Args:
        features: Features in the order that drives discovery and ids.
        threshold: Maximum centroid distance for a direct link, in degrees.

    Returns:
        Clusters in emission order; ``id`` is the emission index and
        members are listed in breadth-first visitation order. An empty
        input gives an empty list.

    Raises:
        ValueError: If *threshold* is negative or NaN.
    """
    if not threshold >= 0:
        msg = f"Distance threshold must be a non-negative number, got {threshold!r}"
        raise ValueError(msg)

    centroids = [feature_centroid(f) for f in features]
    visited: set[int] = set()
    clusters: list[Cluster] = []

    for start in range(len(features)):
        if start in visited:
            continue

        members: list[ClusterMember] = []
        queue: deque[int] = deque([start])

        while queue:
            idx = queue.popleft()
            if idx in visited:
                continue
            visited.add(idx)

            centroid = centroids[idx]
            if centroid is None:
                continue
            members.append(ClusterMember(feature=features[idx], centroid=centroid, index=idx))

            for j, other in enumerate(centroids):
                if j in visited or other is None:
                    continue
                if distance(centroid, other) <= threshold:
                    queue.append(j)

        if members:
            cluster_centroid = mean_point(m.centroid for m in members)
            clusters.append(Cluster(id=len(clusters), members=members, centroid=cluster_centroid))

    logger.info(
        "Clustering complete | features=%d | threshold=%s | clusters=%d | unclustered=%d",
        len(features),
        threshold,
        len(clusters),
        sum(1 for c in centroids if c is None),
    )
    return clusters


def feature_centroid(feature: Feature) -> Coordinate | None:
    """Representative point of a feature.

    Point: its coordinate. LineString: mean of its vertices. Polygon:
    mean of the outer-ring vertices (a repeated closing vertex is
    counted like any other). ``None`` when there are no vertices.
    """
    vertices = feature.geometry.vertices()
    if not vertices:
        return None
    return mean_point(vertices)


def distance(a: Coordinate, b: Coordinate) -> float:
    """Plane Euclidean distance between two ``(lon, lat)`` pairs, in degrees."""
    dlng = a[0] - b[0]
    dlat = a[1] - b[1]
    return math.sqrt(dlng * dlng + dlat * dlat)


def mean_point(points: Iterable[Coordinate]) -> Coordinate:
    """Unweighted mean of an iterable of ``(lon, lat)`` pairs."""
    pts = list(points)
    count = len(pts)
    return (sum(p[0] for p in pts) / count, sum(p[1] for p in pts) / count)


def summarize_clusters(
    clusters: Sequence[Cluster],
    total_features: int,
    *,
    threshold: float = 0.0,
) -> ClusterSummary:
    """Headline figures for a clustering run.

    ``average_cluster_size`` is ``total_features / len(clusters)`` rounded
    to one decimal place, as shown in the wizard's result panel.
    """
    if not clusters:
        return ClusterSummary(total_features=total_features, threshold=threshold)

    return ClusterSummary(
        total_clusters=len(clusters),
        total_features=total_features,
        average_cluster_size=round(total_features / len(clusters), 1),
        largest_cluster_size=max(c.size for c in clusters),
        threshold=threshold,
    )
