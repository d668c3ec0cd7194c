"""
Quantization error taxonomy.

Every condition is raised synchronously at the quantize/select boundary;
there is no partial-result mode.
"""


class QuantizationError(ValueError):
    """Base class for palette computation failures."""
    pass


class UnsupportedAlgorithmError(QuantizationError):
    """Unknown algorithm selector."""
    pass


class InvalidColorCountError(QuantizationError):
    """Requested color count is not a positive integer."""
    pass


class InvalidPixelBufferError(QuantizationError):
    """Pixel data has the wrong shape, size or channel range."""
    pass


class EmptyPaletteError(QuantizationError):
    """An operation that needs at least one palette color got none."""
    pass
