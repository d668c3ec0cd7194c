"""
Background color selection.

Picks the palette color that sits closest, on average, to the pixels along
the image border, so the image can be framed in a matching color.
"""

from typing import Sequence
from loguru import logger

from .errors import EmptyPaletteError
from .metric import distances_to
from .palette import Color
from .pixels import PixelBuffer, as_pixel_array


def select_background(palette: Sequence[Color], border_pixels) -> str:
    """
    Choose the palette color with the smallest mean distance to the border.

    Args:
        palette: Computed palette
        border_pixels: Border pixels in any form accepted by as_pixel_array

    Returns:
        Hex string of the chosen color. Ties keep the earlier palette entry;
        with no border pixels the first palette color is returned.

    Raises:
        EmptyPaletteError: If the palette is empty
    """
    if not palette:
        raise EmptyPaletteError("Cannot select a background from an empty palette")

    border = as_pixel_array(border_pixels)
    if border.shape[0] == 0:
        return palette[0].hex

    best = palette[0]
    best_distance = float("inf")
    for color in palette:
        mean_distance = float(distances_to(border, color.rgb).mean())
        if mean_distance < best_distance:
            best_distance = mean_distance
            best = color

    logger.debug(f"Background {best.hex}: mean border distance {best_distance:.2f} "
                 f"over {border.shape[0]} pixels")
    return best.hex


def select_background_for_buffer(palette: Sequence[Color], buffer: PixelBuffer) -> str:
    """Select a background using the border of a full pixel buffer."""
    return select_background(palette, buffer.border_pixels())
