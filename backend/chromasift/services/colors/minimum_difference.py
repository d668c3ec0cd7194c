"""
Minimum-difference palette refinement.

Seeds the palette from a random shuffle of the pixels and refines it with a
fixed number of assign/average passes. Unlike k-means there is no
convergence check, and an empty cluster keeps its previous color.
"""

import numpy as np
from typing import List, Optional
from loguru import logger

from .centroids import EmptyClusterPolicy, assign_nearest, recompute_centroids
from .palette import Color, ThresholdCoverage, build_palette, validate_color_count
from .pixels import as_pixel_array

REFINEMENT_PASSES = 10


def minimum_difference(pixels, color_count: int, rng: Optional[np.random.Generator] = None,
                       coverage=None) -> List[Color]:
    """
    Quantize pixels by iterative minimum-difference refinement.

    Args:
        pixels: Pixel input accepted by as_pixel_array
        color_count: Target palette size
        rng: Random generator used for the seeding shuffle
        coverage: Coverage estimator (threshold distance by default)

    Returns:
        Palette in seed order; shorter than color_count when there are
        fewer pixels than requested colors.
    """
    color_count = validate_color_count(color_count)
    pixels = as_pixel_array(pixels)
    coverage = coverage or ThresholdCoverage()

    n = pixels.shape[0]
    if n == 0:
        return []

    if rng is None:
        rng = np.random.default_rng()

    # Shuffle then take a prefix: seeds never repeat a pixel position
    order = np.asarray(rng.permutation(n))[:color_count]
    palette = pixels[order].astype(np.int64)

    for _ in range(REFINEMENT_PASSES):
        labels = assign_nearest(pixels, palette)
        palette, sizes = recompute_centroids(
            pixels, labels, palette, EmptyClusterPolicy.KEEP_PREVIOUS
        )

    logger.debug(f"Minimum difference: colors={palette.shape[0]}, pixels={n}, "
                 f"empty clusters={int(np.count_nonzero(sizes == 0))}")

    return build_palette(pixels, ((c, None) for c in palette), coverage)
