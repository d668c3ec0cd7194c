"""
Algorithm registry and the quantize entry point.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from .errors import UnsupportedAlgorithmError
from .kmeans import kmeans
from .median_cut import median_cut
from .minimum_difference import minimum_difference
from .octree import octree_quantize
from .palette import Color, validate_color_count
from .pixels import as_pixel_array
from .popularity import popularity


class AlgorithmId(str, Enum):
    MEDIAN_CUT = "medianCut"
    MINIMUM_DIFFERENCE = "minimumDifference"
    K_MEANS = "kMeans"
    OCTREE = "octree"
    POPULARITY = "popularity"


@dataclass(frozen=True)
class AlgorithmSpec:
    """Registry entry for one quantizer."""
    id: AlgorithmId
    label: str
    func: Callable[..., List[Color]]
    stochastic: bool


ALGORITHMS: Dict[AlgorithmId, AlgorithmSpec] = {
    AlgorithmId.MEDIAN_CUT: AlgorithmSpec(AlgorithmId.MEDIAN_CUT, "Median cut", median_cut, False),
    AlgorithmId.MINIMUM_DIFFERENCE: AlgorithmSpec(
        AlgorithmId.MINIMUM_DIFFERENCE, "Minimum difference", minimum_difference, True
    ),
    AlgorithmId.K_MEANS: AlgorithmSpec(AlgorithmId.K_MEANS, "K-Means", kmeans, True),
    AlgorithmId.OCTREE: AlgorithmSpec(AlgorithmId.OCTREE, "Octree", octree_quantize, False),
    AlgorithmId.POPULARITY: AlgorithmSpec(AlgorithmId.POPULARITY, "Popularity", popularity, False),
}

# Selector values used by older clients
ALGORITHM_ALIASES: Dict[str, AlgorithmId] = {
    "octreeQuantization": AlgorithmId.OCTREE,
    "popularityQuantization": AlgorithmId.POPULARITY,
}


def resolve_algorithm(algorithm: Union[str, AlgorithmId]) -> AlgorithmId:
    """
    Map a selector to an AlgorithmId.

    Raises:
        UnsupportedAlgorithmError: For unknown selectors; no default is applied
    """
    if isinstance(algorithm, AlgorithmId):
        return algorithm
    if isinstance(algorithm, str):
        if algorithm in ALGORITHM_ALIASES:
            return ALGORITHM_ALIASES[algorithm]
        try:
            return AlgorithmId(algorithm)
        except ValueError:
            pass
    supported = ", ".join(a.value for a in AlgorithmId)
    raise UnsupportedAlgorithmError(
        f"Unsupported algorithm {algorithm!r}; expected one of: {supported}"
    )


def is_stochastic(algorithm: Union[str, AlgorithmId]) -> bool:
    return ALGORITHMS[resolve_algorithm(algorithm)].stochastic


def quantize(algorithm: Union[str, AlgorithmId], pixels, color_count: int,
             rng: Optional[np.random.Generator] = None) -> List[Color]:
    """
    Reduce pixels to a palette with the selected algorithm.

    Args:
        algorithm: AlgorithmId or its string value
        pixels: PixelBuffer, (N, 3|4) array or sequence of RGB triples
        color_count: Requested palette size (>= 1)
        rng: Random generator for k-means / minimum difference; ignored by
            the deterministic algorithms

    Returns:
        Palette of at most color_count colors

    Raises:
        UnsupportedAlgorithmError: Unknown algorithm
        InvalidColorCountError: color_count is not a positive integer
        InvalidPixelBufferError: Malformed pixel input
    """
    spec = ALGORITHMS[resolve_algorithm(algorithm)]
    color_count = validate_color_count(color_count)
    pixel_array = as_pixel_array(pixels)

    if spec.stochastic:
        return spec.func(pixel_array, color_count, rng=rng)
    return spec.func(pixel_array, color_count)
