"""Shared fixtures for imogen tests."""

import numpy as np
import pytest
from PIL import Image

from imogen.drawing.rasterizer import rasterize
from imogen.imaging import make_environment


class CountingRasterizer:
    """Wraps the real rasterizer and counts calls."""

    def __init__(self):
        self.calls = 0

    def __call__(self, polygons, width, height):
        self.calls += 1
        return rasterize(polygons, width, height)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def target_image():
    """Small two-tone target: left half red, right half blue."""
    data = np.zeros((8, 12, 3), dtype=np.uint8)
    data[:, :6] = (200, 30, 30)
    data[:, 6:] = (30, 30, 200)
    return Image.fromarray(data)


@pytest.fixture
def counting_rasterizer():
    return CountingRasterizer()


@pytest.fixture
def env(target_image, counting_rasterizer):
    return make_environment(target_image, max_age=15, rasterizer=counting_rasterizer)
