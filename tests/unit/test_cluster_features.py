"""Tests for the cluster_features activity.

Covers:
- Feature centroids (Point, LineString, Polygon outer ring)
- Plane Euclidean distance on degrees
- Connected components by BFS flood fill (ids, member order, centroids)
- Partition, monotonicity and determinism properties
- Degenerate inputs (empty, threshold 0, NaN, no vertices)
- Cluster summary figures
"""

from __future__ import annotations

import math
import random

import pytest

from khasra_cluster.activities.cluster_features import (
    cluster_features,
    distance,
    feature_centroid,
    mean_point,
    summarize_clusters,
)
from khasra_cluster.models.feature import (
    Feature,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
)
from tests.conftest import point_feature


def _points(*coords: tuple[float, float]) -> list[Feature]:
    return [point_feature(lon, lat, index=i) for i, (lon, lat) in enumerate(coords)]


class TestFeatureCentroid:
    """Representative point per geometry type."""

    def test_point_is_itself(self) -> None:
        assert feature_centroid(point_feature(3.5, -2.0)) == (3.5, -2.0)

    def test_polygon_outer_ring_mean(self) -> None:
        feature = Feature(geometry=PolygonGeometry(rings=[[(0, 0), (2, 0), (2, 2), (0, 2)]]))
        assert feature_centroid(feature) == (1.0, 1.0)

    def test_polygon_closing_vertex_counted(self) -> None:
        feature = Feature(geometry=PolygonGeometry(rings=[[(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)]]))
        assert feature_centroid(feature) == pytest.approx((0.8, 0.8))

    def test_polygon_inner_rings_ignored(self) -> None:
        feature = Feature(
            geometry=PolygonGeometry(
                rings=[[(0, 0), (2, 0), (2, 2), (0, 2)], [(100, 100), (101, 100), (101, 101)]]
            )
        )
        assert feature_centroid(feature) == (1.0, 1.0)

    def test_linestring_vertex_mean(self) -> None:
        feature = Feature(geometry=LineStringGeometry(coordinates=[(0, 0), (1, 0), (5, 0)]))
        assert feature_centroid(feature) == (2.0, 0.0)

    def test_empty_geometry_has_no_centroid(self) -> None:
        assert feature_centroid(Feature(geometry=LineStringGeometry(coordinates=[]))) is None
        assert feature_centroid(Feature(geometry=PolygonGeometry(rings=[]))) is None

    def test_nan_propagates(self) -> None:
        feature = Feature(geometry=LineStringGeometry(coordinates=[(0, 0), (math.nan, 1)]))
        lon, lat = feature_centroid(feature)  # type: ignore[misc]
        assert math.isnan(lon)
        assert lat == 0.5


class TestDistance:
    def test_euclidean(self) -> None:
        assert distance((0, 0), (3, 4)) == 5.0

    def test_no_geodesic_correction(self) -> None:
        """One degree of longitude counts the same at the equator and at 60N."""
        assert distance((0, 0), (1, 0)) == distance((0, 60), (1, 60))

    def test_mean_point(self) -> None:
        assert mean_point([(0, 0), (1, 0)]) == (0.5, 0.0)


class TestScenarios:
    """Reference scenarios."""

    def test_two_near_one_far(self, scenario_points: list[Feature]) -> None:
        clusters = cluster_features(scenario_points, 2)

        assert len(clusters) == 2
        assert clusters[0].id == 0
        assert clusters[0].member_indices == [0, 1]
        assert clusters[0].centroid == (0.5, 0.0)
        assert clusters[0].size == 2
        assert clusters[1].id == 1
        assert clusters[1].member_indices == [2]
        assert clusters[1].centroid == (10.0, 10.0)

    def test_empty_input(self) -> None:
        assert cluster_features([], 10) == []
        assert cluster_features([], 0) == []

    def test_threshold_zero_groups_identical_centroids_only(self) -> None:
        features = _points((1, 1), (1, 1), (1, 1.000001))
        clusters = cluster_features(features, 0)
        assert [c.member_indices for c in clusters] == [[0, 1], [2]]

    def test_threshold_is_inclusive(self) -> None:
        clusters = cluster_features(_points((0, 0), (3, 4)), 5)
        assert len(clusters) == 1

    def test_members_carry_feature_and_centroid(self, scenario_points: list[Feature]) -> None:
        member = cluster_features(scenario_points, 2)[0].members[1]
        assert member.feature is scenario_points[1]
        assert member.centroid == (1.0, 0.0)
        assert member.index == 1


class TestComponentDiscovery:
    """Breadth-first flood fill over the implicit threshold graph."""

    def test_chain_is_transitive(self) -> None:
        """A-B and B-C within threshold link A and C even though A-C is not."""
        clusters = cluster_features(_points((0, 0), (1, 0), (2, 0)), 1)
        assert len(clusters) == 1
        assert clusters[0].member_indices == [0, 1, 2]

    def test_member_order_is_bfs_not_input(self) -> None:
        # 0 links to 2 and 3; 2 links to 1.
        features = _points((0, 0), (2, 1), (1, 0), (-1, 0))
        clusters = cluster_features(features, 1.5)
        assert len(clusters) == 1
        assert clusters[0].member_indices == [0, 2, 3, 1]

    def test_ids_follow_first_unvisited_index(self) -> None:
        features = _points((50, 50), (0, 0), (50.5, 50), (0.5, 0))
        clusters = cluster_features(features, 1)
        assert [c.member_indices for c in clusters] == [[0, 2], [1, 3]]
        assert [c.id for c in clusters] == [0, 1]

    def test_cluster_centroid_unweighted_mean_of_members(self, mixed_features: list[Feature]) -> None:
        clusters = cluster_features(mixed_features, 100)
        assert len(clusters) == 1
        # Point (77, 28), LineString mean (77, 28), Polygon mean (77, 28)
        assert clusters[0].centroid == pytest.approx((77.0, 28.0))

    def test_feature_without_centroid_excluded(self) -> None:
        features = [
            point_feature(0, 0),
            Feature(geometry=LineStringGeometry(coordinates=[])),
            point_feature(0.5, 0),
        ]
        clusters = cluster_features(features, 1)
        assert [c.member_indices for c in clusters] == [[0, 2]]

    def test_only_uncentroidable_features(self) -> None:
        assert cluster_features([Feature(geometry=PolygonGeometry(rings=[]))], 5) == []

    def test_nan_centroid_is_singleton(self) -> None:
        features = [
            point_feature(0, 0),
            Feature(geometry=PointGeometry(coordinates=(math.nan, 0.0))),
            point_feature(0.1, 0),
        ]
        clusters = cluster_features(features, 50)
        assert [c.member_indices for c in clusters] == [[0, 2], [1]]
        assert math.isnan(clusters[1].centroid[0])

    @pytest.mark.parametrize("threshold", [-1.0, math.nan])
    def test_invalid_threshold_rejected(self, threshold: float) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            cluster_features(_points((0, 0)), threshold)


class TestClusteringProperties:
    """Partition, monotonicity and determinism on random point sets."""

    @pytest.fixture()
    def random_points(self) -> list[Feature]:
        rng = random.Random(20240611)
        return _points(*[(rng.uniform(0, 10), rng.uniform(0, 10)) for _ in range(60)])

    @pytest.mark.parametrize("threshold", [0.0, 0.5, 1.0, 2.5, 20.0])
    def test_partition(self, random_points: list[Feature], threshold: float) -> None:
        clusters = cluster_features(random_points, threshold)
        indices = [i for c in clusters for i in c.member_indices]
        assert sorted(indices) == list(range(len(random_points)))

    def test_monotonic_in_threshold(self, random_points: list[Feature]) -> None:
        thresholds = [0.0, 0.3, 0.6, 1.0, 1.5, 3.0, 20.0]
        runs = [cluster_features(random_points, t) for t in thresholds]

        for smaller, larger in zip(runs, runs[1:], strict=False):
            assert len(larger) <= len(smaller)
            owner = {i: c for c in larger for i in c.member_indices}
            for cluster in smaller:
                containing = {owner[i].id for i in cluster.member_indices}
                assert len(containing) == 1
                assert owner[cluster.member_indices[0]].size >= cluster.size

    def test_deterministic(self, random_points: list[Feature]) -> None:
        first = cluster_features(random_points, 1.2)
        second = cluster_features(random_points, 1.2)
        assert [c.to_dict() for c in first] == [c.to_dict() for c in second]

    def test_large_threshold_single_cluster(self, random_points: list[Feature]) -> None:
        clusters = cluster_features(random_points, 100)
        assert len(clusters) == 1
        assert clusters[0].size == len(random_points)


class TestSummarizeClusters:
    def test_summary(self, scenario_points: list[Feature]) -> None:
        clusters = cluster_features(scenario_points, 2)
        summary = summarize_clusters(clusters, len(scenario_points), threshold=2)

        assert summary.total_clusters == 2
        assert summary.total_features == 3
        assert summary.average_cluster_size == 1.5
        assert summary.largest_cluster_size == 2
        assert summary.threshold == 2

    def test_average_rounded_to_one_decimal(self) -> None:
        clusters = cluster_features(_points((0, 0), (10, 0), (20, 0)), 1)
        assert summarize_clusters(clusters, 10).average_cluster_size == 3.3

    def test_no_clusters(self) -> None:
        summary = summarize_clusters([], 0)
        assert summary.total_clusters == 0
        assert summary.average_cluster_size == 0.0
        assert summary.largest_cluster_size == 0
