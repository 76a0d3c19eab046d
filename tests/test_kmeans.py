"""
Tests for the k-means engine and distance helpers.
"""

import numpy as np
import pytest

from kmeans import (
    DimensionMismatch,
    InvalidClusterRequest,
    cluster,
    distance,
    kmeans,
    pairwise_distances,
)


def random_points(seed: int = 7, n: int = 200) -> np.ndarray:
    return np.random.default_rng(seed).integers(0, 256, size=(n, 3))


# =============================================================================
# Distance
# =============================================================================

def test_distance_is_euclidean():
    assert distance([0, 0, 0], [3, 4, 0]) == 5.0
    assert distance([1, 2, 3], [1, 2, 3]) == 0.0


def test_distance_is_symmetric():
    points = random_points(n=20)
    for a in points:
        for b in points:
            assert distance(a, b) == distance(b, a)


def test_distance_rejects_mismatched_dimensions():
    with pytest.raises(DimensionMismatch):
        distance([1, 2, 3], [1, 2])


def test_pairwise_distances_shape_and_values():
    points = np.array([[0.0, 0.0], [3.0, 4.0]])
    centroids = np.array([[0.0, 0.0], [0.0, 4.0], [3.0, 0.0]])
    d = pairwise_distances(points, centroids)
    assert d.shape == (2, 3)
    assert d[1, 0] == pytest.approx(5.0)
    assert d[1, 1] == pytest.approx(3.0)


def test_pairwise_distances_rejects_mismatched_dimensions():
    with pytest.raises(DimensionMismatch):
        pairwise_distances(np.zeros((4, 3)), np.zeros((2, 2)))


# =============================================================================
# Clustering
# =============================================================================

def test_returns_k_clusters_covering_every_point():
    points = random_points()
    clusters = cluster(points, 5, max_iterations=100, rng=1)

    assert len(clusters) == 5
    assert sum(len(c) for c in clusters) == len(points)

    merged = np.concatenate(clusters)
    assert np.array_equal(
        merged[np.lexsort(merged.T)],
        points[np.lexsort(points.T)].astype(np.float64),
    )


@pytest.mark.parametrize('seed', range(20))
def test_black_and_white_split_regardless_of_seeding(seed):
    points = [[0, 0, 0], [0, 0, 0], [255, 255, 255], [255, 255, 255]]
    clusters = cluster(points, 2, rng=seed)

    contents = sorted(tuple(map(tuple, c.tolist())) for c in clusters)
    assert contents == [
        ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
        ((255.0, 255.0, 255.0), (255.0, 255.0, 255.0)),
    ]


def test_single_iteration_terminates():
    result = kmeans(random_points(), 4, max_iterations=1, rng=3)
    assert result.iterations == 1
    assert len(result.clusters) == 4


def test_converged_result_is_stable_under_more_iterations():
    points = random_points()
    first = kmeans(points, 3, rng=11)
    assert first.converged

    longer = kmeans(points, 3, max_iterations=first.iterations + 50, rng=11)
    assert longer.iterations == first.iterations
    assert np.array_equal(longer.centroids, first.centroids)
    for a, b in zip(first.clusters, longer.clusters):
        assert np.array_equal(a, b)


def test_same_seed_same_clusters():
    points = random_points()
    a = kmeans(points, 4, rng=42)
    b = kmeans(points, 4, rng=np.random.default_rng(42))
    assert np.array_equal(a.centroids, b.centroids)


def test_uniform_points_fill_one_cluster_and_keep_empty_centroids():
    points = [[5, 5, 5]] * 6
    result = kmeans(points, 3, rng=0)

    sizes = [len(c) for c in result.clusters]
    assert sizes == [6, 0, 0]  # Ties go to the lowest-indexed centroid
    assert result.converged
    assert np.array_equal(result.centroids, np.full((3, 3), 5.0))
    assert result.clusters[1].shape == (0, 3)


def test_empty_cluster_keeps_its_own_centroid():
    # With k == n every point seeds a centroid; the duplicate zero seed
    # loses all its points to the lower-indexed zero and must stay put.
    points = [[0.0], [0.0], [10.0]]
    result = kmeans(points, 3, rng=5)

    assert result.converged
    assert sorted(result.centroids[:, 0].tolist()) == [0.0, 0.0, 10.0]
    assert sorted(len(c) for c in result.clusters) == [0, 1, 2]


# =============================================================================
# Preconditions
# =============================================================================

def test_empty_points_rejected():
    with pytest.raises(InvalidClusterRequest):
        cluster([], 1, max_iterations=10)


@pytest.mark.parametrize('k', [0, -1, 5])
def test_out_of_range_k_rejected(k):
    with pytest.raises(InvalidClusterRequest):
        cluster([[1, 2, 3], [4, 5, 6], [7, 8, 9]], k, max_iterations=10)


def test_zero_iterations_rejected():
    with pytest.raises(InvalidClusterRequest):
        cluster([[1, 2, 3]], 1, max_iterations=0)


def test_ragged_points_rejected():
    with pytest.raises(DimensionMismatch):
        cluster([[1, 2, 3], [4, 5]], 1, max_iterations=10)


def test_flat_sequence_rejected():
    with pytest.raises(DimensionMismatch):
        cluster([1, 2, 3], 1, max_iterations=10)


def test_errors_are_value_errors():
    assert issubclass(InvalidClusterRequest, ValueError)
    assert issubclass(DimensionMismatch, ValueError)
