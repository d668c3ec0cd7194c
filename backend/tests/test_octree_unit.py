"""
Unit tests for octree quantization.
"""
import numpy as np
import pytest

from chromasift.services.colors.octree import (
    NO_CHILD, Octree, build_octree, complexity_level, determine_depth,
    octant_index, octree_quantize, resolution_level, target_level
)


class TestDepthHeuristic:
    """Test adaptive depth selection"""

    @pytest.mark.parametrize("pixels,level", [(1, 3), (999, 3), (1000, 4), (99999, 4), (100000, 5), (90000, 4)])
    def test_resolution_level(self, pixels, level):
        """Test resolution level"""
        assert resolution_level(pixels) == level

    @pytest.mark.parametrize("distinct,level", [(1, 0), (2, 1), (8, 1), (9, 2), (64, 2), (4096, 4)])
    def test_complexity_level(self, distinct, level):
        """Test complexity level"""
        assert complexity_level(distinct) == level

    @pytest.mark.parametrize("count,level", [(1, 0), (2, 1), (8, 1), (16, 2), (256, 3)])
    def test_target_level(self, count, level):
        """Test target level"""
        assert target_level(count) == level

    def test_minimum_of_three_caps(self):
        """Test minimum of three caps"""
        assert determine_depth(500, 4096, 64) == 2
        assert determine_depth(200000, 2 ** 24, 4096) == 4
        assert determine_depth(500, 2 ** 24, 4096) == 3


class TestOctantIndex:
    """Test child slot computation"""

    def test_top_level_bits(self):
        """Test top level bits"""
        assert octant_index(255, 0, 0, 1) == 4
        assert octant_index(0, 255, 0, 1) == 2
        assert octant_index(0, 0, 255, 1) == 1
        assert octant_index(127, 127, 127, 1) == 0
        assert octant_index(128, 128, 128, 1) == 7

    def test_deeper_level_bits(self):
        """Test deeper level bits"""
        # level 2 splits each channel at multiples of 64
        assert octant_index(64, 0, 0, 2) == 4
        assert octant_index(128, 0, 0, 2) == 0
        assert octant_index(192, 0, 0, 2) == 4


class TestOctreeArena:
    """Test the node arena"""

    def test_shape_after_inserts(self):
        """Test shape after inserts"""
        tree = Octree(depth=1)
        tree.insert((0, 0, 0))
        tree.insert((255, 0, 0))
        tree.insert((0, 255, 0))
        tree.insert((10, 10, 10))
        assert tree.node_count == 4
        assert sum(1 for c in tree.children[0] if c != NO_CHILD) == 3

    def test_leaves_in_slot_order(self):
        """Test leaves in slot order"""
        tree = Octree(depth=1)
        tree.insert((255, 0, 0))
        tree.insert((0, 0, 0), weight=2)
        tree.insert((0, 255, 0))
        assert tree.leaves() == [((0, 0, 0), 2), ((0, 255, 0), 1), ((255, 0, 0), 1)]

    def test_depth_zero_keeps_everything_in_root(self):
        """Test depth zero keeps everything in root"""
        tree = Octree(depth=0)
        tree.insert((0, 0, 0))
        tree.insert((255, 255, 255))
        assert tree.node_count == 1
        assert tree.leaves() == [((128, 128, 128), 2)]

    def test_weighted_insert_matches_repeated_insert(self, random_pixels):
        """Test weighted insert matches repeated insert"""
        weighted = build_octree(random_pixels, 3)
        repeated = Octree(3)
        for pixel in random_pixels:
            repeated.insert(tuple(pixel))
        assert sorted(weighted.leaves()) == sorted(repeated.leaves())

    def test_negative_depth_rejected(self):
        """Test negative depth rejected"""
        with pytest.raises(ValueError):
            Octree(depth=-1)


class TestOctreeQuantize:
    """Test full octree runs"""

    def test_under_supply_not_padded(self):
        """Test under supply not padded"""
        pixels = [(0, 0, 0), (255, 0, 0), (0, 255, 0)] * 5
        palette = octree_quantize(pixels, 8)
        assert len(palette) == 3

    def test_sorted_by_count_with_exact_percentages(self):
        """Test sorted by count with exact percentages"""
        pixels = [(0, 0, 255)] + [(255, 0, 0)] * 3
        palette = octree_quantize(pixels, 2)
        assert [c.hex for c in palette] == ["ff0000", "0000ff"]
        assert [c.percentage for c in palette] == [75.0, 25.0]

    def test_nearby_colors_merge(self):
        """Test nearby colors merge"""
        pixels = [(10, 10, 10), (20, 20, 20), (200, 200, 200)]
        palette = octree_quantize(pixels, 2)
        assert [c.rgb for c in palette] == [(15, 15, 15), (200, 200, 200)]
        assert palette[0].percentage == pytest.approx(200 / 3)
        assert palette[1].percentage == pytest.approx(100 / 3)

    def test_truncates_to_requested_count(self, random_pixels):
        """Test truncates to requested count"""
        palette = octree_quantize(random_pixels, 4)
        assert len(palette) <= 4
        counts = [c.percentage for c in palette]
        assert counts == sorted(counts, reverse=True)

    def test_monochrome(self):
        """Test monochrome"""
        palette = octree_quantize([(255, 0, 0)] * 7, 1)
        assert [c.to_dict() for c in palette] == [{"hex": "ff0000", "rgb": [255, 0, 0], "percentage": 100.0}]

    def test_deterministic(self, random_pixels):
        """Test that octree output is a pure function of input"""
        assert octree_quantize(random_pixels, 16) == octree_quantize(random_pixels, 16)

    def test_empty_input(self):
        """Test octree on an empty pixel list"""
        assert octree_quantize([], 8) == []
