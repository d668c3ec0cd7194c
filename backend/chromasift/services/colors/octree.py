"""
Octree palette quantization.

Colors are routed down an 8-ary tree over the RGB cube, one bit per channel
per level, and accumulate in the leaves. The tree depth is picked per image
from its resolution, its number of distinct colors and the requested
palette size. Leaves become palette entries ordered by pixel count, and
their percentages are exact counts.

The tree is stored as an arena of parallel lists indexed by node handle;
absent children are NO_CHILD.
"""

import math
import numpy as np
from typing import List, Tuple
from loguru import logger

from .metric import RGB, distinct_color_count, pack_rgb, round_half_up, unpack_rgb
from .palette import Color, ExactCountCoverage, build_palette, validate_color_count
from .pixels import as_pixel_array

NO_CHILD = -1
ROOT = 0


def resolution_level(pixel_count: int) -> int:
    """Depth cap from image size: 3 below 1000 pixels, 4 below 100000, else 5."""
    if pixel_count < 1000:
        return 3
    if pixel_count < 100000:
        return 4
    return 5


def complexity_level(distinct_colors: int) -> int:
    return math.ceil(math.log2(distinct_colors) / 3)


def target_level(color_count: int) -> int:
    return math.ceil(math.log2(color_count) / 3)


def determine_depth(pixel_count: int, distinct_colors: int, color_count: int) -> int:
    """Tree depth: the smallest of the resolution, complexity and target caps."""
    return min(
        resolution_level(pixel_count),
        complexity_level(distinct_colors),
        target_level(color_count),
    )


def octant_index(r: int, g: int, b: int, level: int) -> int:
    """
    Child slot for a color at a node `level` steps above the leaves.

    Takes bit (8 - level) of each channel counted from the least
    significant end, i.e. floor(c / (256 / 2^level)) & 1, packed as RGB.
    """
    shift = 8 - level
    return (((r >> shift) & 1) << 2) | (((g >> shift) & 1) << 1) | ((b >> shift) & 1)


class Octree:
    """Sparse color octree with a fixed leaf depth."""

    def __init__(self, depth: int):
        if depth < 0:
            raise ValueError(f"Octree depth must be >= 0, got {depth}")
        self.depth = depth
        self.children: List[List[int]] = []
        self.sums: List[List[int]] = []
        self.counts: List[int] = []
        self._new_node()

    def _new_node(self) -> int:
        self.children.append([NO_CHILD] * 8)
        self.sums.append([0, 0, 0])
        self.counts.append(0)
        return len(self.counts) - 1

    @property
    def node_count(self) -> int:
        return len(self.counts)

    def insert(self, rgb: RGB, weight: int = 1) -> int:
        """
        Add `weight` pixels of color `rgb`.

        Returns:
            Handle of the leaf the color landed in
        """
        r, g, b = (int(c) for c in rgb)
        node = ROOT
        for level in range(self.depth, 0, -1):
            slot = octant_index(r, g, b, level)
            child = self.children[node][slot]
            if child == NO_CHILD:
                child = self._new_node()
                self.children[node][slot] = child
            node = child

        acc = self.sums[node]
        acc[0] += r * weight
        acc[1] += g * weight
        acc[2] += b * weight
        self.counts[node] += weight
        return node

    def leaves(self) -> List[Tuple[RGB, int]]:
        """
        Leaf colors in depth-first order (child slots 0 to 7).

        Returns:
            List of (rounded mean color, pixel count)
        """
        result = []
        stack = [ROOT]
        while stack:
            node = stack.pop()
            count = self.counts[node]
            if count > 0:
                mean = round_half_up(np.asarray(self.sums[node], dtype=np.float64) / count)
                result.append((tuple(int(c) for c in mean), count))
                continue
            for child in reversed(self.children[node]):
                if child != NO_CHILD:
                    stack.append(child)
        return result


def build_octree(pixels: np.ndarray, depth: int) -> Octree:
    """Populate an octree; each distinct color is inserted once with its multiplicity."""
    tree = Octree(depth)
    keys, counts = np.unique(pack_rgb(pixels), return_counts=True)
    for key, count in zip(keys, counts):
        tree.insert(unpack_rgb(key), int(count))
    return tree


def octree_quantize(pixels, color_count: int, coverage=None) -> List[Color]:
    """
    Quantize pixels with an adaptive-depth octree.

    Args:
        pixels: Pixel input accepted by as_pixel_array
        color_count: Maximum palette size
        coverage: Coverage estimator (exact leaf counts by default)

    Returns:
        Most populated leaves first, at most color_count of them. No
        padding when the tree has fewer leaves.
    """
    color_count = validate_color_count(color_count)
    pixels = as_pixel_array(pixels)
    coverage = coverage or ExactCountCoverage()

    n = pixels.shape[0]
    if n == 0:
        return []

    distinct = distinct_color_count(pixels)
    depth = determine_depth(n, distinct, color_count)
    tree = build_octree(pixels, depth)

    leaves = sorted(tree.leaves(), key=lambda leaf: leaf[1], reverse=True)
    selected = leaves[:color_count]

    logger.debug(f"Octree: depth={depth}, nodes={tree.node_count}, "
                 f"leaves={len(leaves)}, returned={len(selected)}")

    return build_palette(pixels, selected, coverage)
