"""Quick start example for imogen.

Evolves polygons towards a generated gradient target for a few hundred
generations and saves the best result.
"""

from itertools import islice
from pathlib import Path

import numpy as np
from PIL import Image


def make_target(width: int = 150, height: int = 100) -> Image.Image:
    """A diagonal gradient with a dark disc, so there is something to match."""
    y, x = np.mgrid[0:height, 0:width]
    data = np.zeros((height, width, 3), dtype=np.uint8)
    data[..., 0] = (255 * x / width).astype(np.uint8)
    data[..., 2] = (255 * y / height).astype(np.uint8)
    disc = (x - width / 2) ** 2 + (y - height / 2) ** 2 < (height / 4) ** 2
    data[disc] = (20, 20, 20)
    return Image.fromarray(data)


def main():
    print("Imogen - Quick Start Demo")
    print("=" * 50)

    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)

    from imogen.drawing.fitness import render_creature
    from imogen.genetic.creature import polygonal_creature
    from imogen.genetic.population import population, run_population
    from imogen.imaging import make_environment, save_creature_image

    rng = np.random.default_rng(42)
    env = make_environment(make_target())

    print("\n1. Creating population of 15 creatures with 400 genes each...")
    pop = population(lambda: polygonal_creature(400, rng=rng), env, 15, rng=rng)

    def report(new_pop):
        if new_pop.generation % 50 == 0:
            best = new_pop.best
            print(f"   Generation {new_pop.generation}: fitness={best.fitness}, genes={len(best.genome)}")

    print("\n2. Evolving 300 generations...")
    for pop in islice(run_population(pop, report), 300):
        pass

    print("\n3. Saving results...")
    env.target_raster.save(output_dir / "quickstart_target.png")
    render_creature(pop.best, env).save(output_dir / "quickstart_best.png")
    save_creature_image(pop.best, env, output_dir / "quickstart_best_large.png", 1000)
    print(f"   Saved to {output_dir}/")


if __name__ == "__main__":
    main()
