"""
Color metric and encoding helpers.

Euclidean distance over raw RGB is used by every quantizer for
nearest-color assignment and by the threshold coverage estimator.
"""

import math
import numpy as np
from typing import Sequence, Tuple

RGB = Tuple[int, int, int]


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Convert an RGB triple to a lowercase 6-digit hex string (no '#')."""
    r, g, b = [int(x) for x in rgb]
    return f"{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert hex color string (with or without '#') to RGB tuple."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def color_distance(a: Sequence[int], b: Sequence[int]) -> float:
    """
    Euclidean distance between two RGB triples.

    Symmetric, and zero only when all three channels are equal.
    """
    dr = float(a[0]) - float(b[0])
    dg = float(a[1]) - float(b[1])
    db = float(a[2]) - float(b[2])
    return math.sqrt(dr * dr + dg * dg + db * db)


def distances_to(pixels: np.ndarray, color: Sequence[int]) -> np.ndarray:
    """
    Distance from every pixel to a single color.

    Args:
        pixels: (N, 3) array of RGB pixels
        color: RGB triple

    Returns:
        (N,) float64 array of Euclidean distances
    """
    diff = pixels.astype(np.float64) - np.asarray(color, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=1))


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round non-negative values with .5 going up (numpy rounds half to even)."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


def rounded_mean(pixels: np.ndarray) -> RGB:
    """
    Channel-wise mean of a pixel bucket, rounded half up.

    Raises:
        ValueError: If the bucket is empty
    """
    count = pixels.shape[0]
    if count == 0:
        raise ValueError("Cannot average an empty pixel bucket")
    means = pixels.astype(np.float64).sum(axis=0) / count
    return tuple(int(v) for v in round_half_up(means))


def pack_rgb(pixels: np.ndarray) -> np.ndarray:
    """Pack (N, 3) pixels into 24-bit integer keys 0xRRGGBB."""
    p = pixels.astype(np.int64)
    return (p[:, 0] << 16) | (p[:, 1] << 8) | p[:, 2]


def unpack_rgb(key: int) -> RGB:
    key = int(key)
    return ((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)


def distinct_color_count(pixels: np.ndarray) -> int:
    """Number of distinct exact 24-bit colors."""
    if pixels.shape[0] == 0:
        return 0
    return int(np.unique(pack_rgb(pixels)).size)


def color_complexity(pixels: np.ndarray) -> float:
    """Ratio of distinct colors to total pixel count (0.0 for empty input)."""
    total = pixels.shape[0]
    if total == 0:
        return 0.0
    return distinct_color_count(pixels) / total
