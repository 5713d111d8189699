"""Tests for the polygon rasterizer and pixel accessor."""

import numpy as np
import pytest
from PIL import Image

from imogen.drawing.phenotype import Polygon
from imogen.drawing.rasterizer import coverage_mask, image_pixels, rasterize

FULL_SQUARE = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))


class TestRasterize:
    """Tests for rasterize."""

    def test_blank_canvas_is_white(self):
        image = rasterize([], 12, 8)
        assert image.size == (12, 8)
        assert image.mode == "RGB"
        assert np.all(np.asarray(image) == 255)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            rasterize([], 0, 10)
        with pytest.raises(ValueError):
            rasterize([], 10, -1)

    def test_opaque_fill(self):
        """Test an opaque full-canvas polygon replaces the background."""
        image = rasterize([Polygon((0.0, 1.0, 0.0, 1.0), FULL_SQUARE)], 10, 10)
        pixels = np.asarray(image)
        assert tuple(pixels[5, 5]) == (0, 255, 0)

    def test_alpha_blend(self):
        """Test half-transparent black over white gives mid grey."""
        image = rasterize([Polygon((0.0, 0.0, 0.0, 0.5), FULL_SQUARE)], 10, 10)
        value = np.asarray(image)[5, 5]
        assert np.all(np.abs(value.astype(int) - 128) <= 1)

    def test_later_polygons_on_top(self):
        """Test draw order: the last opaque polygon wins."""
        red = Polygon((1.0, 0.0, 0.0, 1.0), FULL_SQUARE)
        blue = Polygon((0.0, 0.0, 1.0, 1.0), FULL_SQUARE)
        assert tuple(np.asarray(rasterize([red, blue], 6, 6))[3, 3]) == (0, 0, 255)
        assert tuple(np.asarray(rasterize([blue, red], 6, 6))[3, 3]) == (255, 0, 0)

    def test_triangle_covers_one_corner(self):
        """Test a lower-left triangle leaves the opposite corner white."""
        triangle = Polygon((1.0, 0.0, 0.0, 1.0), ((0.0, 0.0), (1.0, 0.0), (0.0, 1.0)))
        pixels = np.asarray(rasterize([triangle], 10, 10))
        assert tuple(pixels[1, 1]) == (255, 0, 0)
        assert tuple(pixels[9, 9]) == (255, 255, 255)

    def test_deterministic(self, rng):
        polys = [
            Polygon(tuple(rng.random(4)), tuple(map(tuple, rng.random((5, 2)))))
            for _ in range(5)
        ]
        a = np.asarray(rasterize(polys, 20, 15))
        b = np.asarray(rasterize(polys, 20, 15))
        np.testing.assert_array_equal(a, b)


class TestCoverageMask:
    """Tests for anti-aliased coverage."""

    def test_range_and_shape(self):
        mask = coverage_mask(((0.1, 0.1), (0.9, 0.2), (0.4, 0.8)), 16, 12)
        assert mask.shape == (12, 16)
        assert mask.min() >= 0.0
        assert mask.max() <= 1.0

    def test_partial_coverage_on_edges(self):
        """Test edge pixels receive fractional coverage."""
        mask = coverage_mask(((0.0, 0.0), (1.0, 0.0), (0.0, 1.0)), 16, 16)
        fractional = (mask > 0) & (mask < 1)
        assert fractional.any()


class TestImagePixels:
    """Tests for the packed pixel accessor."""

    def test_packing(self):
        data = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255], [1, 2, 3]]], dtype=np.uint8)
        pixels = image_pixels(Image.fromarray(data))
        assert pixels.tolist() == [0xFF0000, 0x00FF00, 0x0000FF, 0x010203]

    def test_scan_order(self):
        data = np.zeros((2, 3, 3), dtype=np.uint8)
        data[1, 0] = (0, 0, 9)
        pixels = image_pixels(Image.fromarray(data))
        assert len(pixels) == 6
        assert pixels[3] == 9

    def test_alpha_ignored(self):
        rgba = Image.new("RGBA", (2, 2), (10, 20, 30, 0))
        assert set(image_pixels(rgba).tolist()) == {0x0A141E}
