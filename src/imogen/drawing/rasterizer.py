"""Polygon rasterizer and pixel accessor.

Polygons are filled with Pillow at a supersampled resolution and box-filtered
back down, which gives each pixel a fractional coverage. Coverage times the
polygon alpha is then blended onto a white canvas in draw order.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from imogen.drawing.phenotype import Polygon, Vertex

SUPERSAMPLE = 4
BACKGROUND: Tuple[int, int, int] = (255, 255, 255)


def _check_size(width: int, height: int) -> None:
    if width < 1 or height < 1:
        raise ValueError(f"Raster size must be positive, got {width}x{height}")


def coverage_mask(
    vertices: Sequence[Vertex],
    width: int,
    height: int,
    supersample: int = SUPERSAMPLE,
) -> np.ndarray:
    """Anti-aliased coverage of a polygon as a float array in [0, 1].

    Args:
        vertices: (x, y) pairs as fractions of the canvas.
        width: Output width in pixels.
        height: Output height in pixels.
        supersample: Linear oversampling factor.

    Returns:
        Array of shape (height, width).
    """
    _check_size(width, height)
    big_w, big_h = width * supersample, height * supersample
    mask = Image.new("L", (big_w, big_h), 0)
    ImageDraw.Draw(mask).polygon(
        [(x * big_w, y * big_h) for x, y in vertices],
        fill=255,
    )
    if supersample > 1:
        mask = mask.resize((width, height), Image.Resampling.BOX)
    return np.asarray(mask, dtype=np.float64) / 255.0


def rasterize(
    polygons: Iterable[Polygon],
    width: int,
    height: int,
    supersample: int = SUPERSAMPLE,
) -> Image.Image:
    """Draw polygons onto a white RGB image, first polygon at the bottom.

    Each polygon's colour alpha is used as given; callers decide how gene
    values map to opacity.
    """
    _check_size(width, height)
    canvas = np.empty((height, width, 3), dtype=np.float64)
    canvas[...] = BACKGROUND

    for polygon in polygons:
        r, g, b, a = polygon.color
        weight = coverage_mask(polygon.vertices, width, height, supersample) * a
        if not weight.any():
            continue
        color = np.array([r, g, b], dtype=np.float64) * 255.0
        canvas += (color - canvas) * weight[..., np.newaxis]

    return Image.fromarray(np.rint(canvas).astype(np.uint8))


def image_pixels(image: Image.Image) -> np.ndarray:
    """Return the image as packed 0xRRGGBB integers in scan order.

    Alpha, if present, is dropped.
    """
    rgb = np.asarray(image.convert("RGB"), dtype=np.uint32)
    packed = (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]
    return packed.reshape(-1)
