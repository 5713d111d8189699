"""Decoding genomes into polygons, drawing them and scoring the result."""

from imogen.drawing.phenotype import Polygon, next_polygon, polygons
from imogen.drawing.rasterizer import image_pixels, rasterize
from imogen.drawing.fitness import (
    Environment,
    calculate_distance,
    composite_alpha,
    draw_genes,
    image_distance,
    render_creature,
)

__all__ = [
    "Polygon",
    "next_polygon",
    "polygons",
    "image_pixels",
    "rasterize",
    "Environment",
    "calculate_distance",
    "composite_alpha",
    "draw_genes",
    "image_distance",
    "render_creature",
]
