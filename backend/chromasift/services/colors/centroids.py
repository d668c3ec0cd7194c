"""
Shared assign/update step for the iterative quantizers.

K-means and minimum difference run the same nearest-centroid assignment
and mean update; they only differ in what an empty cluster becomes.
"""

import numpy as np
from enum import Enum
from typing import Tuple

from .metric import round_half_up

# Pixel-centroid pairs evaluated per block during assignment
ASSIGN_BLOCK_PAIRS = 1 << 18


class EmptyClusterPolicy(str, Enum):
    """What a centroid becomes when no pixel was assigned to it."""
    RESET_TO_BLACK = "reset_to_black"
    KEEP_PREVIOUS = "keep_previous"


def assign_nearest(pixels: np.ndarray, centroids: np.ndarray,
                   block_pairs: int = ASSIGN_BLOCK_PAIRS) -> np.ndarray:
    """
    Label each pixel with the index of its nearest centroid.

    Ties go to the lowest centroid index. Pixels are processed in blocks
    so the distance matrix never exceeds `block_pairs` entries.

    Args:
        pixels: (N, 3) pixels
        centroids: (K, 3) centroids, K >= 1

    Returns:
        (N,) array of centroid indices
    """
    n = pixels.shape[0]
    k = centroids.shape[0]
    labels = np.empty(n, dtype=np.intp)
    if n == 0:
        return labels

    cents = centroids.astype(np.float64)
    rows = max(1, block_pairs // max(1, k))
    for start in range(0, n, rows):
        block = pixels[start:start + rows].astype(np.float64)
        diff = block[:, None, :] - cents[None, :, :]
        # Squared distance preserves the ordering of the Euclidean metric
        d2 = np.sum(diff * diff, axis=2)
        labels[start:start + rows] = np.argmin(d2, axis=1)
    return labels


def recompute_centroids(pixels: np.ndarray, labels: np.ndarray, centroids: np.ndarray,
                        policy: EmptyClusterPolicy) -> Tuple[np.ndarray, np.ndarray]:
    """
    Move every centroid to the rounded mean of its assigned pixels.

    Args:
        pixels: (N, 3) pixels
        labels: (N,) centroid index per pixel
        centroids: (K, 3) current centroids
        policy: Handling of centroids with no assigned pixels

    Returns:
        Tuple of (updated (K, 3) int64 centroids, (K,) cluster sizes)
    """
    k = centroids.shape[0]
    counts = np.bincount(labels, minlength=k)
    sums = np.zeros((k, 3), dtype=np.float64)
    for channel in range(3):
        sums[:, channel] = np.bincount(labels, weights=pixels[:, channel], minlength=k)

    updated = centroids.astype(np.int64).copy()
    filled = counts > 0
    if np.any(filled):
        updated[filled] = round_half_up(sums[filled] / counts[filled, None])

    if policy is EmptyClusterPolicy.RESET_TO_BLACK:
        updated[~filled] = 0

    return updated, counts


def max_centroid_shift(previous: np.ndarray, current: np.ndarray) -> float:
    """Largest distance any centroid moved between two iterations."""
    if previous.shape[0] == 0:
        return 0.0
    diff = current.astype(np.float64) - previous.astype(np.float64)
    return float(np.sqrt(np.sum(diff * diff, axis=1)).max())
