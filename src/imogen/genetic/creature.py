"""Creatures: the unit of selection.

A creature carries a genome plus the bookkeeping the population needs
(age, generation, fitness) and the last render of its genome.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Protocol, TypeVar

import numpy as np
from PIL import Image

from imogen.drawing.fitness import Environment, calculate_distance
from imogen.genetic import genome as genetics

DEFAULT_NUM_GENES = 200

E = TypeVar("E", bound="Evolving")


class Evolving(Protocol):
    """What a creature must respond to in order to evolve.

    Every method returns a new instance; nothing is changed in place.
    """

    def make_new(self: E) -> E:
        """Return an empty/default copy."""
        ...

    def mutate(self: E) -> E:
        """Return a copy with one mutation applied to the genome."""
        ...

    def cross_breed(self: E, other: E) -> E:
        """Combine two creatures' genes into an offspring."""
        ...

    def calculate_fitness(self: E, environment: Environment) -> E:
        """Return a copy with fitness computed against ``environment``."""
        ...

    def get_fitness(self) -> Optional[float]:
        """Fetch the fitness, ``None`` if never evaluated."""
        ...


@dataclass(eq=False)
class Creature:
    """A candidate image: a genome of polygons plus its evaluation state."""

    age: int = 0
    generation: int = 0
    genome: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.float64))
    fitness: Optional[int] = None
    cached_render: Optional[Image.Image] = field(default=None, repr=False)
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)

    def __post_init__(self):
        self.genome = np.asarray(self.genome, dtype=np.float64).reshape(-1)
        genetics.require_rng(self.rng)

    def make_new(self) -> 'Creature':
        return Creature(rng=self.rng)

    def mutate(self) -> 'Creature':
        return replace(
            self,
            genome=genetics.mutate(self.genome, self.rng),
            fitness=None,
            cached_render=None,
        )

    def cross_breed(self, other: 'Creature') -> 'Creature':
        return cross_breed(self, other)

    def calculate_fitness(self, environment: Environment) -> 'Creature':
        return calculate_distance(self, environment)

    def get_fitness(self) -> Optional[int]:
        return self.fitness

    def to_dict(self) -> dict:
        """Serializable summary; the render is not included."""
        return {
            'age': self.age,
            'generation': self.generation,
            'fitness': self.fitness,
            'genome': self.genome.tolist(),
        }

    @classmethod
    def from_dict(cls, d: dict, rng: Optional[np.random.Generator] = None) -> 'Creature':
        return cls(
            age=d.get('age', 0),
            generation=d.get('generation', 0),
            genome=genetics.as_genome(d.get('genome', [])),
            rng=rng if rng is not None else np.random.default_rng(),
        )


def cross_breed(a: Creature, b: Creature) -> Creature:
    """Uniform crossover of two creatures.

    The child genome is as long as the shorter parent's. It starts at age 0,
    one generation past the older parent, with no fitness and no render.
    """
    return Creature(
        age=0,
        generation=max(a.generation, b.generation) + 1,
        genome=genetics.crossover(a.genome, b.genome, a.rng),
        rng=a.rng,
    )


def polygonal_creature(
    length: int = DEFAULT_NUM_GENES,
    rng: Optional[np.random.Generator] = None,
) -> Creature:
    """Create a generation-0 creature with ``length`` random genes."""
    if rng is None:
        rng = np.random.default_rng()
    return Creature(genome=genetics.random_genome(length, rng), rng=rng)
