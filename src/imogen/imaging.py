"""Loading target images and saving rendered creatures."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from imogen.drawing.fitness import Environment, Rasterizer, render_creature
from imogen.drawing.rasterizer import image_pixels, rasterize
from imogen.genetic.creature import Creature

logger = logging.getLogger(__name__)


def scale_to_width(image: Image.Image, width: int) -> Image.Image:
    """Scale ``image`` to ``width`` pixels wide, keeping its aspect ratio."""
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    height = max(1, round(image.height * width / image.width))
    return image.convert("RGB").resize((width, height), Image.Resampling.LANCZOS)


def load_target_image(path: str | Path, render_width: int) -> Image.Image:
    """Open an image file and scale it to the working resolution."""
    with Image.open(path) as image:
        scaled = scale_to_width(image, render_width)
    logger.info(f"Loaded {path} as {scaled.width}x{scaled.height}")
    return scaled


def make_environment(
    image: Image.Image,
    max_age: int = 15,
    rasterizer: Rasterizer = rasterize,
) -> Environment:
    """Build an environment around an already scaled target image."""
    target = image.convert("RGB")
    return Environment(
        target_raster=target,
        target_pixels=image_pixels(target),
        width=target.width,
        height=target.height,
        max_age=max_age,
        rasterizer=rasterizer,
    )


def output_size(env: Environment, output_width: int) -> tuple[int, int]:
    """Size of a saved image ``output_width`` wide with the target's aspect."""
    return output_width, max(1, round(output_width * env.height / env.width))


def save_creature_image(
    creature: Creature,
    env: Environment,
    path: str | Path,
    output_width: int,
) -> Path:
    """Render ``creature`` at ``output_width`` and write it as a PNG."""
    width, height = output_size(env, output_width)
    image = render_creature(creature, env, width=width, height=height)
    path = Path(path)
    image.save(path, format="PNG")
    logger.info(f"Saved {width}x{height} render to {path}")
    return path
