"""Decoding genomes into polygons.

A polygon is just a run of floats in [0, 1]. The first four make up the
colour, the fifth says how many (x, y) pairs follow. Coordinates stay as
fractions of the canvas so the same genome can be drawn at any size.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

# Colour (4) plus vertex count (1).
HEADER_LENGTH = 5
MIN_VERTICES = 3
MAX_VERTICES = 9

Color = Tuple[float, float, float, float]
Vertex = Tuple[float, float]


@dataclass(frozen=True)
class Polygon:
    """One translucent polygon, ready for drawing."""

    color: Color
    vertices: Tuple[Vertex, ...]

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    def with_alpha(self, alpha: float) -> 'Polygon':
        r, g, b, _ = self.color
        return Polygon(color=(r, g, b, alpha), vertices=self.vertices)

    def to_dict(self) -> dict:
        return {
            'color': list(self.color),
            'vertices': [list(v) for v in self.vertices],
        }


def float_to_num_vertices(x: float) -> int:
    """Convert a float in [0, 1] to a vertex count between 3 and 9."""
    return min(int(MIN_VERTICES + x * 6), MAX_VERTICES)


def next_polygon(genes: Sequence[float]) -> Optional[Tuple[Polygon, np.ndarray]]:
    """Peel one polygon off the front of ``genes``.

    Returns ``(polygon, remaining)`` or ``None`` when what is left is too
    short to describe a triangle.
    """
    genes = np.asarray(genes, dtype=np.float64)
    if len(genes) < HEADER_LENGTH:
        return None

    r, g, b, a, vs = (float(v) for v in genes[:HEADER_LENGTH])
    num_verts = float_to_num_vertices(vs)
    tail = genes[HEADER_LENGTH:]

    coords = tail[:2 * num_verts]
    remaining = tail[2 * num_verts:]
    if len(coords) < 2 * MIN_VERTICES:
        return None

    # A short final record keeps whole pairs only.
    coords = coords[:len(coords) - len(coords) % 2]
    vertices = tuple(
        (float(x), float(y)) for x, y in coords.reshape(-1, 2)
    )
    return Polygon(color=(r, g, b, a), vertices=vertices), remaining


def polygons(genes: Sequence[float]) -> List[Polygon]:
    """Turn a genome into the list of polygons it encodes, bottom layer first."""
    result: List[Polygon] = []
    remaining = np.asarray(genes, dtype=np.float64)
    while True:
        step = next_polygon(remaining)
        if step is None:
            return result
        polygon, remaining = step
        result.append(polygon)
