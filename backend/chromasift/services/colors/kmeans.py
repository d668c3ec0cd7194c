"""
K-means palette quantization.

Centroids are seeded by sampling pixels with replacement. The iteration
budget scales with color complexity, and a centroid that ends up with no
pixels is reset to black instead of being re-seeded.
"""

import numpy as np
from typing import List, Optional
from loguru import logger

from .centroids import EmptyClusterPolicy, assign_nearest, max_centroid_shift, recompute_centroids
from .metric import color_complexity
from .palette import Color, ThresholdCoverage, build_palette, validate_color_count
from .pixels import as_pixel_array

COMPLEXITY_THRESHOLD = 0.1
MAX_ITERATIONS_COMPLEX = 20
MAX_ITERATIONS_SIMPLE = 5
CONVERGENCE_TOLERANCE = 1e-3


def kmeans_iteration_budget(pixels: np.ndarray) -> int:
    """20 iterations when distinct/total exceeds 0.1, otherwise 5."""
    if color_complexity(pixels) > COMPLEXITY_THRESHOLD:
        return MAX_ITERATIONS_COMPLEX
    return MAX_ITERATIONS_SIMPLE


def kmeans(pixels, k: int, rng: Optional[np.random.Generator] = None,
           coverage=None) -> List[Color]:
    """
    Cluster pixels into k colors.

    Args:
        pixels: Pixel input accepted by as_pixel_array
        k: Number of centroids
        rng: Random generator used to pick the initial centroids; a fresh
            unseeded generator is created when omitted
        coverage: Coverage estimator (threshold distance by default)

    Returns:
        k colors in centroid index order. Percentages come from the
        coverage estimator, not from final cluster membership.
    """
    k = validate_color_count(k)
    pixels = as_pixel_array(pixels)
    coverage = coverage or ThresholdCoverage()

    n = pixels.shape[0]
    if n == 0:
        return []

    if rng is None:
        rng = np.random.default_rng()

    seeds = np.asarray(rng.integers(0, n, size=k))
    centroids = pixels[seeds].astype(np.int64)

    max_iterations = kmeans_iteration_budget(pixels)
    iterations = 0
    for _ in range(max_iterations):
        labels = assign_nearest(pixels, centroids)
        updated, _ = recompute_centroids(
            pixels, labels, centroids, EmptyClusterPolicy.RESET_TO_BLACK
        )
        shift = max_centroid_shift(centroids, updated)
        centroids = updated
        iterations += 1
        if shift < CONVERGENCE_TOLERANCE:
            break

    logger.debug(f"K-means: k={k}, pixels={n}, iterations={iterations}/{max_iterations}")

    return build_palette(pixels, ((c, None) for c in centroids), coverage)
