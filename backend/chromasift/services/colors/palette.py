"""
Palette records and coverage estimation.

A color's percentage is an estimate of how much of the image it
represents. Two estimators exist:

- ThresholdCoverage: share of pixels closer than a fixed distance to the
  color. Used by median cut, k-means and minimum difference. Neighborhoods
  of different palette colors can overlap or miss pixels, so the
  percentages of one palette do not have to sum to 100.
- ExactCountCoverage: share of pixels actually attributed to the color
  (octree leaf counts, popularity frequencies).
"""

import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidColorCountError
from .metric import RGB, distances_to, pack_rgb, rgb_to_hex

COVERAGE_THRESHOLD = 50.0


@dataclass(frozen=True)
class Color:
    """Single palette entry."""
    hex: str
    rgb: RGB
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hex": self.hex,
            "rgb": list(self.rgb),
            "percentage": self.percentage,
        }


class ThresholdCoverage:
    """Percentage of pixels strictly within `threshold` of the color."""

    name = "threshold"

    def __init__(self, threshold: float = COVERAGE_THRESHOLD):
        self.threshold = threshold

    def estimate(self, pixels: np.ndarray, rgb: Sequence[int], count: Optional[int] = None) -> float:
        total = pixels.shape[0]
        if total == 0:
            return 0.0
        hits = int(np.count_nonzero(distances_to(pixels, rgb) < self.threshold))
        return hits / total * 100.0


class ExactCountCoverage:
    """
    Percentage from an exact pixel count.

    Uses the count the algorithm already tracked when given, otherwise
    counts pixels equal to the color.
    """

    name = "exact"

    def estimate(self, pixels: np.ndarray, rgb: Sequence[int], count: Optional[int] = None) -> float:
        total = pixels.shape[0]
        if total == 0:
            return 0.0
        if count is None:
            key = (int(rgb[0]) << 16) | (int(rgb[1]) << 8) | int(rgb[2])
            count = int(np.count_nonzero(pack_rgb(pixels) == key))
        return count / total * 100.0


def build_palette(pixels: np.ndarray,
                  entries: Iterable[Tuple[Sequence[int], Optional[int]]],
                  estimator) -> List[Color]:
    """
    Turn (rgb, count) entries into Color records in the given order.

    Args:
        pixels: (N, 3) pixels the palette was computed from
        entries: Representative colors with an optional exact pixel count
        estimator: Coverage estimator instance

    Returns:
        List of Color
    """
    palette = []
    for rgb, count in entries:
        rgb = tuple(int(c) for c in rgb)
        palette.append(Color(
            hex=rgb_to_hex(rgb),
            rgb=rgb,
            percentage=estimator.estimate(pixels, rgb, count)
        ))
    return palette


def validate_color_count(color_count: Any) -> int:
    """
    Check a requested palette size.

    Raises:
        InvalidColorCountError: Unless color_count is an integer >= 1
    """
    if isinstance(color_count, bool) or not isinstance(color_count, (int, np.integer)):
        raise InvalidColorCountError(f"color count must be an integer, got {color_count!r}")
    if color_count <= 0:
        raise InvalidColorCountError(f"color count must be positive, got {color_count}")
    return int(color_count)
