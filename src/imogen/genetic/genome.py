"""Genome representation and mutation operators.

A genome is a flat 1-D float array with every value in [0, 1]. It has no
fixed length: the drawing code reads it left to right and turns it into as
many polygons as it can hold, so the operators here are free to grow and
shrink it.

Every operator is pure. It takes a genome and a ``numpy.random.Generator``
and returns a new array, leaving the input untouched.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import numpy as np

from imogen.exceptions import InvalidConfigurationError


Genome = np.ndarray
Mutator = Callable[[Genome, np.random.Generator], Genome]


def require_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    """Return ``rng`` if it can be sampled from, otherwise fail."""
    if rng is None or not (hasattr(rng, "random") and hasattr(rng, "integers")):
        raise InvalidConfigurationError(
            f"A numpy random Generator is required, got {type(rng).__name__}"
        )
    return rng


def as_genome(values) -> Genome:
    """Coerce a sequence of floats into a genome array."""
    genome = np.asarray(values, dtype=np.float64).reshape(-1)
    if genome.size and (genome.min() < 0.0 or genome.max() > 1.0):
        raise ValueError("Genome values must lie in [0, 1]")
    return genome


def random_genome(length: int, rng: np.random.Generator) -> Genome:
    """Sample a genome of ``length`` uniform values in [0, 1)."""
    if length < 0:
        raise ValueError(f"Genome length must be non-negative, got {length}")
    return require_rng(rng).random(length)


def _random_index(genome: Genome, rng: np.random.Generator) -> int:
    # Position 0 is the only valid choice for an empty genome.
    if len(genome) == 0:
        return 0
    return int(rng.integers(len(genome)))


def drop_rand(genome: Genome, rng: np.random.Generator) -> Genome:
    """Drop the value at a random index."""
    rng = require_rng(rng)
    if len(genome) == 0:
        return np.asarray(genome, dtype=np.float64).copy()
    return np.delete(genome, _random_index(genome, rng))


def insert_rand(genome: Genome, rng: np.random.Generator) -> Genome:
    """Insert a new value before a randomly chosen element."""
    rng = require_rng(rng)
    return np.insert(genome, _random_index(genome, rng), rng.random())


def append_rand(genome: Genome, rng: np.random.Generator) -> Genome:
    """Append a new value to the end."""
    rng = require_rng(rng)
    return np.append(genome, rng.random())


def change_rand(genome: Genome, rng: np.random.Generator) -> Genome:
    """Swap the value at a random index for a new one."""
    rng = require_rng(rng)
    child = np.asarray(genome, dtype=np.float64).copy()
    if len(child):
        child[_random_index(child, rng)] = rng.random()
    return child


MUTATORS: List[Mutator] = [drop_rand, insert_rand, append_rand, change_rand]


def mutate(genome: Genome, rng: np.random.Generator) -> Genome:
    """Apply exactly one operator from ``MUTATORS``, chosen uniformly."""
    rng = require_rng(rng)
    mutator = MUTATORS[int(rng.integers(len(MUTATORS)))]
    return mutator(genome, rng)


def crossover(
    genome_a: Genome,
    genome_b: Genome,
    rng: np.random.Generator,
) -> Genome:
    """Uniform crossover over the common prefix of two genomes.

    The child is as long as the shorter parent; each position is taken from
    either parent with equal probability.
    """
    rng = require_rng(rng)
    genome_a = np.asarray(genome_a, dtype=np.float64)
    genome_b = np.asarray(genome_b, dtype=np.float64)
    length = min(len(genome_a), len(genome_b))
    take_a = rng.random(length) < 0.5
    return np.where(take_a, genome_a[:length], genome_b[:length])
