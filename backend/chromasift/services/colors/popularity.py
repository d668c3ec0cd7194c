"""
Popularity quantization: the most frequent exact colors win.
"""

import numpy as np
from typing import List
from loguru import logger

from .metric import pack_rgb, unpack_rgb
from .palette import Color, ExactCountCoverage, build_palette, validate_color_count
from .pixels import as_pixel_array


def color_frequencies(pixels: np.ndarray):
    """
    Exact frequency table of 24-bit colors.

    Returns:
        Tuple of (keys, counts), ordered by descending count with ties in
        order of first occurrence
    """
    keys, first_seen, counts = np.unique(
        pack_rgb(pixels), return_index=True, return_counts=True
    )
    order = np.lexsort((first_seen, -counts))
    return keys[order], counts[order]


def popularity(pixels, color_count: int, coverage=None) -> List[Color]:
    """
    Pick the color_count most frequent colors.

    Returns:
        Palette ordered by frequency; shorter when the image has fewer
        distinct colors
    """
    color_count = validate_color_count(color_count)
    pixels = as_pixel_array(pixels)
    coverage = coverage or ExactCountCoverage()

    if pixels.shape[0] == 0:
        return []

    keys, counts = color_frequencies(pixels)
    logger.debug(f"Popularity: distinct={keys.size}, requested={color_count}")

    entries = [(unpack_rgb(key), int(count))
               for key, count in zip(keys[:color_count], counts[:color_count])]
    return build_palette(pixels, entries, coverage)
