"""
Unit tests for the quantize entry point and cross-algorithm properties.
"""
import numpy as np
import pytest

from chromasift.services.colors import (
    AlgorithmId, InvalidColorCountError, InvalidPixelBufferError,
    PixelBuffer, UnsupportedAlgorithmError, quantize
)
from chromasift.services.colors.quantize import ALGORITHMS, is_stochastic, resolve_algorithm

ALL_ALGORITHMS = list(AlgorithmId)
DETERMINISTIC = [AlgorithmId.MEDIAN_CUT, AlgorithmId.OCTREE, AlgorithmId.POPULARITY]


class TestDispatch:
    """Test algorithm selection"""

    def test_registry_covers_every_algorithm(self):
        """Test registry covers every algorithm"""
        assert set(ALGORITHMS) == set(AlgorithmId)

    def test_resolve_by_value(self):
        """Test resolving algorithm ids and enum members"""
        assert resolve_algorithm("kMeans") is AlgorithmId.K_MEANS
        assert resolve_algorithm(AlgorithmId.OCTREE) is AlgorithmId.OCTREE

    def test_legacy_aliases(self):
        """Test legacy aliases"""
        assert resolve_algorithm("octreeQuantization") is AlgorithmId.OCTREE
        assert resolve_algorithm("popularityQuantization") is AlgorithmId.POPULARITY

    @pytest.mark.parametrize("name", ["kmeans", "", "dither", None, 3])
    def test_unknown_algorithm(self, name):
        """Test unknown selectors raise"""
        with pytest.raises(UnsupportedAlgorithmError):
            quantize(name, [(0, 0, 0)], 2)

    def test_stochastic_flags(self):
        """Test which algorithms are marked stochastic"""
        assert is_stochastic("kMeans")
        assert is_stochastic("minimumDifference")
        assert not any(is_stochastic(a) for a in DETERMINISTIC)

    @pytest.mark.parametrize("count", [0, -1, 1.5])
    def test_invalid_color_count(self, count):
        """Test invalid color count"""
        with pytest.raises(InvalidColorCountError):
            quantize("popularity", [(0, 0, 0)], count)

    def test_invalid_pixels(self):
        """Test malformed pixel input raises"""
        with pytest.raises(InvalidPixelBufferError):
            quantize("medianCut", [(0, 0, 300)], 2)

    def test_accepts_pixel_buffer(self):
        """Test dispatch with a PixelBuffer input"""
        data = bytes([255, 0, 0, 255] * 4)
        buffer = PixelBuffer(width=2, height=2, data=data)
        palette = quantize(AlgorithmId.POPULARITY, buffer, 3)
        assert [c.hex for c in palette] == ["ff0000"]


class TestCrossAlgorithmProperties:
    """Test invariants that hold for every algorithm"""

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    @pytest.mark.parametrize("count", [1, 2, 3, 8, 16])
    def test_palette_bounds(self, algorithm, count, random_pixels):
        """Test palette size and channel bounds for every algorithm"""
        palette = quantize(algorithm, random_pixels, count, rng=np.random.default_rng(11))
        assert len(palette) <= count
        for color in palette:
            assert all(0 <= c <= 255 for c in color.rgb)
            assert 0.0 <= color.percentage <= 100.0
            assert color.hex == "%02x%02x%02x" % color.rgb

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_monochrome_single_color(self, algorithm):
        """Test monochrome single color"""
        pixels = [(255, 0, 0)] * 25
        palette = quantize(algorithm, pixels, 1, rng=np.random.default_rng(0))
        assert [c.to_dict() for c in palette] == [
            {"hex": "ff0000", "rgb": [255, 0, 0], "percentage": 100.0}
        ]

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_empty_buffer_gives_empty_palette(self, algorithm):
        """Test empty buffer gives empty palette"""
        assert quantize(algorithm, [], 4) == []

    @pytest.mark.parametrize("algorithm", DETERMINISTIC)
    def test_deterministic_algorithms_repeat(self, algorithm, random_pixels):
        """Test deterministic algorithms repeat"""
        first = quantize(algorithm, random_pixels, 8)
        second = quantize(algorithm, random_pixels.copy(), 8)
        assert first == second

    @pytest.mark.parametrize("algorithm", [AlgorithmId.K_MEANS, AlgorithmId.MINIMUM_DIFFERENCE])
    def test_seeded_stochastic_algorithms_repeat(self, algorithm, random_pixels):
        """Test seeded stochastic algorithms repeat"""
        first = quantize(algorithm, random_pixels, 8, rng=np.random.default_rng(5))
        second = quantize(algorithm, random_pixels, 8, rng=np.random.default_rng(5))
        assert first == second

    def test_median_cut_non_power_of_two(self, random_pixels):
        """Test median cut non power of two"""
        assert len(quantize("medianCut", random_pixels, 5)) == 4

    def test_octree_under_supply(self):
        """Test octree under supply"""
        pixels = [(0, 0, 0), (255, 0, 0), (0, 255, 0)] * 4
        assert len(quantize("octree", pixels, 8)) == 3

    def test_popularity_tie_break(self):
        """Test popularity tie break"""
        pixels = [(1, 1, 1), (2, 2, 2), (1, 1, 1), (2, 2, 2)]
        assert quantize("popularity", pixels, 1)[0].hex == "010101"
