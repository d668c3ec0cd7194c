"""
Pixel buffer handling.

A PixelBuffer is the flat, row-major RGBA (or RGB) byte sequence a
rendering surface hands over. Quantizers work on an (N, 3) uint8 array;
alpha is discarded here.
"""

import base64
import binascii
import numpy as np
from dataclasses import dataclass
from typing import Any

from .errors import InvalidPixelBufferError


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major pixel snapshot with 3 or 4 bytes per pixel."""
    width: int
    height: int
    data: bytes
    channels: int = 4

    def __post_init__(self):
        if self.channels not in (3, 4):
            raise InvalidPixelBufferError(f"channels must be 3 or 4, got {self.channels}")
        if self.width < 0 or self.height < 0:
            raise InvalidPixelBufferError(
                f"Negative dimensions: {self.width}x{self.height}"
            )
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise InvalidPixelBufferError(
                f"Buffer holds {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}x{self.channels}"
            )

    @classmethod
    def from_base64(cls, width: int, height: int, data_b64: str, channels: int = 4) -> "PixelBuffer":
        """Build a buffer from base64-encoded raw pixel bytes."""
        try:
            data = base64.b64decode(data_b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidPixelBufferError(f"Invalid base64 pixel data: {str(e)}")
        return cls(width=width, height=height, data=data, channels=channels)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def to_rgb(self) -> np.ndarray:
        """Return pixels as an (N, 3) uint8 array, alpha dropped."""
        flat = np.frombuffer(self.data, dtype=np.uint8)
        return flat.reshape(-1, self.channels)[:, :3]

    def border_pixels(self) -> np.ndarray:
        """
        Collect the pixels on the image border.

        Top and bottom rows are interleaved column by column, followed by
        the left and right columns interleaved row by row. Corner pixels
        appear twice, matching a straightforward per-edge walk.

        Returns:
            (2 * width + 2 * height, 3) uint8 array, empty if either
            dimension is zero
        """
        if self.width == 0 or self.height == 0:
            return np.zeros((0, 3), dtype=np.uint8)

        grid = self.to_rgb().reshape(self.height, self.width, 3)
        rows = np.stack([grid[0], grid[self.height - 1]], axis=1).reshape(-1, 3)
        cols = np.stack([grid[:, 0], grid[:, self.width - 1]], axis=1).reshape(-1, 3)
        return np.concatenate([rows, cols], axis=0)


def as_pixel_array(pixels: Any) -> np.ndarray:
    """
    Normalize supported pixel inputs to an (N, 3) uint8 array.

    Accepts a PixelBuffer, an (N, 3) / (N, 4) array, or a sequence of
    RGB(A) triples. Alpha columns are dropped.

    Raises:
        InvalidPixelBufferError: On wrong shape or channels outside 0-255
    """
    if isinstance(pixels, PixelBuffer):
        return pixels.to_rgb()

    if isinstance(pixels, np.ndarray) and pixels.dtype == np.uint8:
        arr = pixels
    else:
        try:
            arr = np.asarray(pixels)
        except (TypeError, ValueError) as e:
            raise InvalidPixelBufferError(f"Pixels are not numeric triples: {str(e)}")
        if arr.size and not np.issubdtype(arr.dtype, np.integer):
            if not np.issubdtype(arr.dtype, np.floating):
                raise InvalidPixelBufferError(f"Pixels are not numeric triples: dtype {arr.dtype}")
            if not np.all(np.isfinite(arr)) or not np.array_equal(arr, np.floor(arr)):
                raise InvalidPixelBufferError("Pixel channels must be whole numbers")

    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.uint8)

    if arr.ndim != 2 or arr.shape[1] not in (3, 4):
        raise InvalidPixelBufferError(
            f"Expected pixels with shape (N, 3) or (N, 4), got {arr.shape}"
        )

    if arr.dtype != np.uint8:
        if arr.min() < 0 or arr.max() > 255:
            raise InvalidPixelBufferError("Pixel channels must be within 0-255")
        arr = arr.astype(np.uint8)

    return arr[:, :3]
