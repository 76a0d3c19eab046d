"""
K-means clustering of colour points.

Plain Lloyd iterations over an (n, D) point array: seed k distinct points as
centroids, assign every point to its nearest centroid, move each centroid to
the mean of its members, and stop once the centroids no longer move.
"""

from dataclasses import dataclass

import numpy as np
from scipy.spatial.distance import cdist


# =============================================================================
# Constants
# =============================================================================

# Convergence is checked every iteration; the cap only bounds worst-case
# oscillation on floating-point noise.
DEFAULT_MAX_ITERATIONS = 300


# =============================================================================
# Errors
# =============================================================================

class InvalidClusterRequest(ValueError):
    """Raised when k, the iteration cap or the point set cannot be clustered."""


class DimensionMismatch(ValueError):
    """Raised when points of different dimensionality are mixed."""


# =============================================================================
# Distance
# =============================================================================

def distance(p1, p2) -> float:
    """Euclidean distance between two points of equal dimensionality."""
    a = np.asarray(p1, dtype=np.float64)
    b = np.asarray(p2, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatch(f"Cannot compare points of shape {a.shape} and {b.shape}")
    return float(np.linalg.norm(a - b))


def pairwise_distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Distance from every point to every centroid.

    Args:
        points: Array of shape (n, D)
        centroids: Array of shape (k, D)

    Returns:
        Array of shape (n, k)
    """
    if points.shape[1] != centroids.shape[1]:
        raise DimensionMismatch(
            f"Points have {points.shape[1]} dimensions, centroids have {centroids.shape[1]}"
        )
    return cdist(points, centroids)


# =============================================================================
# Clustering
# =============================================================================

@dataclass
class KMeansResult:
    """Outcome of a clustering run."""
    clusters: list  # k arrays of shape (m_i, D), from the last assignment step
    centroids: np.ndarray  # (k, D) centroids after the last update
    iterations: int  # Number of assignment steps performed
    converged: bool  # True if the centroids stopped moving before the cap


def as_points(points) -> np.ndarray:
    """Convert a sequence of points to a float (n, D) array, checking shape."""
    try:
        data = np.asarray(points, dtype=np.float64)
    except ValueError as e:
        raise DimensionMismatch(f"Points do not share one dimensionality: {e}") from e

    if data.size == 0:
        raise InvalidClusterRequest("Cannot cluster an empty point set")
    if data.ndim != 2:
        raise DimensionMismatch(f"Expected a 2-D array of points, got shape {data.shape}")
    return data


def kmeans(points, k: int, max_iterations: int = DEFAULT_MAX_ITERATIONS,
           rng=None) -> KMeansResult:
    """
    Partition points into k clusters.

    Initial centroids are k distinct input points drawn without replacement.
    Ties in the assignment step go to the lowest-indexed centroid. A cluster
    that ends up empty keeps its own centroid from the previous iteration.

    Args:
        points: Sequence of equal-length points, or an (n, D) array
        k: Number of clusters (1 <= k <= n)
        max_iterations: Upper bound on assignment/update rounds
        rng: numpy Generator, integer seed, or None for a fresh generator

    Returns:
        KMeansResult with exactly k clusters (some possibly empty)

    Raises:
        InvalidClusterRequest: If the point set is empty or k/max_iterations
            are out of range
        DimensionMismatch: If the points are ragged
    """
    data = as_points(points)
    n = len(data)

    if k < 1:
        raise InvalidClusterRequest(f"k must be at least 1, got {k}")
    if k > n:
        raise InvalidClusterRequest(f"k={k} exceeds the number of points ({n})")
    if max_iterations < 1:
        raise InvalidClusterRequest(f"max_iterations must be at least 1, got {max_iterations}")

    rng = np.random.default_rng(rng)
    centroids = data[rng.choice(n, size=k, replace=False)]

    clusters = []
    converged = False
    iteration = 0

    while iteration < max_iterations:
        iteration += 1

        # Assignment: argmin picks the first of equal distances
        labels = pairwise_distances(data, centroids).argmin(axis=1)
        clusters = [data[labels == i] for i in range(k)]

        # Update: empty clusters keep their current centroid
        new_centroids = centroids.copy()
        for i, members in enumerate(clusters):
            if len(members) > 0:
                new_centroids[i] = members.mean(axis=0)

        if np.array_equal(new_centroids, centroids):
            converged = True
            break

        centroids = new_centroids

    return KMeansResult(
        clusters=clusters,
        centroids=centroids,
        iterations=iteration,
        converged=converged,
    )


def cluster(points, k: int, max_iterations: int = DEFAULT_MAX_ITERATIONS,
            rng=None) -> list[np.ndarray]:
    """Cluster points and return only the k member arrays."""
    return kmeans(points, k, max_iterations=max_iterations, rng=rng).clusters
