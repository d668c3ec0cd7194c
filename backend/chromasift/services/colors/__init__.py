"""
chromasift Colors Module

Provides the color metric, the five palette quantizers (median cut,
minimum difference, k-means, octree, popularity) and background color
selection for pixel buffers.
"""

from .errors import (
    QuantizationError,
    UnsupportedAlgorithmError,
    InvalidColorCountError,
    InvalidPixelBufferError,
    EmptyPaletteError,
)
from .palette import Color
from .pixels import PixelBuffer
from .quantize import AlgorithmId, quantize
from .background import select_background, select_background_for_buffer

__version__ = "1.0.0"

__all__ = [
    "AlgorithmId",
    "Color",
    "EmptyPaletteError",
    "InvalidColorCountError",
    "InvalidPixelBufferError",
    "PixelBuffer",
    "QuantizationError",
    "UnsupportedAlgorithmError",
    "quantize",
    "select_background",
    "select_background_for_buffer",
]
