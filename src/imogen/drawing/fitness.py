"""Rendering creatures and scoring them against a target image."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

import numpy as np
from PIL import Image

from imogen.drawing.phenotype import Polygon, polygons
from imogen.drawing.rasterizer import image_pixels, rasterize

if TYPE_CHECKING:
    from imogen.genetic.creature import Creature

logger = logging.getLogger(__name__)

Rasterizer = Callable[[Sequence[Polygon], int, int], Image.Image]

# Opacity band that every polygon is squeezed into when drawn.
MIN_OPACITY = 0.25
OPACITY_RANGE = 0.5

# Channel masks/shifts for packed 0xRRGGBB pixels, indexed by pixel % 3.
CHANNEL_MASKS = np.array([0xFF0000, 0x00FF00, 0x0000FF], dtype=np.int64)
CHANNEL_SHIFTS = np.array([16, 8, 0], dtype=np.int64)


@dataclass(frozen=True, eq=False)
class Environment:
    """The target a population is evolving towards.

    ``target_pixels`` is precomputed once from ``target_raster`` with
    ``image_pixels``. ``max_age`` is carried along for callers but nothing
    culls on age.
    """

    target_raster: Image.Image
    target_pixels: np.ndarray
    width: int
    height: int
    max_age: int = 15
    rasterizer: Rasterizer = field(default=rasterize, repr=False, compare=False)

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Environment size must be positive, got {self.width}x{self.height}")
        if len(self.target_pixels) != self.width * self.height:
            raise ValueError(
                f"target_pixels has {len(self.target_pixels)} entries, "
                f"expected {self.width * self.height}"
            )

    @property
    def num_pixels(self) -> int:
        return self.width * self.height


def composite_alpha(a: float) -> float:
    """Map a gene alpha in [0, 1] to the opacity used for drawing.

    Always partially transparent: the result lies in [0.25, 0.75].
    """
    return MIN_OPACITY + OPACITY_RANGE * a


def drawing_polygons(genes: Sequence[float]) -> List[Polygon]:
    """Decode ``genes`` and apply ``composite_alpha`` to every polygon."""
    return [p.with_alpha(composite_alpha(p.color[3])) for p in polygons(genes)]


def draw_genes(
    genes: Sequence[float],
    width: int,
    height: int,
    rasterizer: Rasterizer = rasterize,
) -> Image.Image:
    """Create a new image of the given size with the genome's polygons on it."""
    return rasterizer(drawing_polygons(genes), width, height)


def render_creature(
    creature: 'Creature',
    env: Environment,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> Image.Image:
    """Render a creature's phenotype.

    Defaults to the environment's resolution; pass ``width``/``height`` to
    render the same genome at another size, e.g. for saving.
    """
    return draw_genes(
        creature.genome,
        width or env.width,
        height or env.height,
        rasterizer=env.rasterizer,
    )


def image_distance(pixels_a: np.ndarray, pixels_b: np.ndarray) -> int:
    """Channel-cycling distance between two packed pixel buffers.

    Pixel ``i`` is compared on one channel only, red, green or blue in turn
    by ``i % 3``. The result is the sum of absolute 8-bit differences.
    """
    a = np.asarray(pixels_a, dtype=np.int64)
    b = np.asarray(pixels_b, dtype=np.int64)
    if a.shape != b.shape:
        raise ValueError(f"Pixel buffers differ in size: {a.shape} vs {b.shape}")

    channel = np.arange(a.size) % 3
    masks = CHANNEL_MASKS[channel]
    shifts = CHANNEL_SHIFTS[channel]
    diff = ((a & masks) >> shifts) - ((b & masks) >> shifts)
    return int(np.abs(diff).sum())


def calculate_distance(creature: 'Creature', env: Environment) -> 'Creature':
    """Return a copy of ``creature`` with its fitness set against ``env``.

    The render is cached on the creature and reused while its genome is
    unchanged; the score itself is recomputed on every call.
    """
    image = creature.cached_render
    if image is None:
        image = render_creature(creature, env)
        logger.debug("Rendered %d genes at %dx%d", len(creature.genome), env.width, env.height)
        if image.size != (env.width, env.height):
            raise ValueError(
                f"Rasterizer returned {image.size[0]}x{image.size[1]}, "
                f"expected {env.width}x{env.height}"
            )

    fitness = image_distance(image_pixels(image), env.target_pixels)
    return replace(creature, fitness=fitness, cached_render=image)
