"""
Median cut quantization.

Repeatedly splits pixel buckets at the median of the channel with the
widest range. Each split level doubles the bucket count, so the palette
holds 2^floor(log2(color_count)) colors at most: non-power-of-two counts
are truncated, never rounded up.
"""

import numpy as np
from typing import List, Tuple
from loguru import logger

from .metric import rounded_mean
from .palette import Color, ThresholdCoverage, build_palette, validate_color_count
from .pixels import as_pixel_array


def median_cut_depth(color_count: int) -> int:
    """Number of split levels: floor(log2(color_count))."""
    return int(color_count).bit_length() - 1


def widest_channel(bucket: np.ndarray) -> int:
    """Channel index with the largest value range; R wins over G over B on ties."""
    ranges = bucket.max(axis=0).astype(np.int64) - bucket.min(axis=0).astype(np.int64)
    return int(np.argmax(ranges))


def split_bucket(bucket: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sort a bucket along its widest channel and cut it at the midpoint.

    The sort is stable, so pixels with equal channel values keep their
    input order. The left half gets floor(n / 2) pixels.
    """
    channel = widest_channel(bucket)
    order = np.argsort(bucket[:, channel], kind="stable")
    ordered = bucket[order]
    mid = ordered.shape[0] // 2
    return ordered[:mid], ordered[mid:]


def median_cut(pixels, color_count: int, coverage=None) -> List[Color]:
    """
    Quantize pixels with median cut.

    Args:
        pixels: Pixel input accepted by as_pixel_array
        color_count: Target palette size, expected to be a power of two
        coverage: Coverage estimator (threshold distance by default)

    Returns:
        Palette in left-to-right split order. Empty buckets produce no
        entry, so tiny inputs yield fewer colors.
    """
    color_count = validate_color_count(color_count)
    pixels = as_pixel_array(pixels)
    coverage = coverage or ThresholdCoverage()

    if pixels.shape[0] == 0:
        return []

    depth = median_cut_depth(color_count)
    buckets = [pixels]
    # Level by level instead of recursion; order matches a left-first walk
    for _ in range(depth):
        next_buckets = []
        for bucket in buckets:
            if bucket.shape[0] == 0:
                next_buckets.append(bucket)
                continue
            left, right = split_bucket(bucket)
            next_buckets.append(left)
            next_buckets.append(right)
        buckets = next_buckets

    leaves = [rounded_mean(bucket) for bucket in buckets if bucket.shape[0] > 0]

    logger.debug(f"Median cut: depth={depth}, buckets={len(buckets)}, "
                 f"non-empty={len(leaves)}")

    return build_palette(pixels, ((rgb, None) for rgb in leaves), coverage)
