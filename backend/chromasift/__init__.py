"""
chromasift

Palette extraction service: reduces sampled RGB pixels to a small palette
with one of several quantization strategies.
"""

__version__ = "1.0.0"
