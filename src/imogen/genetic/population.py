"""Population-level operations: cull, regenerate and the generation loop.

A population is treated as a value. Each cycle consumes one and returns a
new one, so earlier generations stay inspectable for as long as the caller
keeps a reference to them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from imogen.drawing.fitness import Environment
from imogen.exceptions import InvalidConfigurationError
from imogen.genetic.creature import Creature
from imogen.genetic.genome import require_rng

logger = logging.getLogger(__name__)

Hook = Callable[['Population'], None]


@dataclass(frozen=True, eq=False)
class Population:
    """A fixed-size group of creatures sharing one environment.

    After every completed cycle ``members`` holds exactly ``pop_size``
    creatures sorted best (lowest fitness) first.
    """

    env: Environment
    pop_size: int
    members: Tuple[Creature, ...]
    generation: int = 0
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)

    @property
    def best(self) -> Optional[Creature]:
        return self.members[0] if self.members else None

    def fitnesses(self) -> List[Optional[int]]:
        return [m.get_fitness() for m in self.members]


def population(
    ctor: Callable[[], Creature],
    env: Environment,
    pop_size: int,
    rng: Optional[np.random.Generator] = None,
) -> Population:
    """Create a generation-0 population of ``pop_size`` fresh creatures.

    Members are not evaluated yet; the first cycle scores them.
    """
    if pop_size < 1:
        raise InvalidConfigurationError(f"pop_size must be positive, got {pop_size}")
    if rng is None:
        rng = np.random.default_rng()
    members = tuple(ctor() for _ in range(pop_size))
    return Population(env=env, pop_size=pop_size, members=members, rng=require_rng(rng))


def cull(pop: Population, keep_n: Optional[int] = None) -> Population:
    """Kill off all but the first ``keep_n`` members. Defaults to keeping 1/3."""
    if keep_n is None:
        keep_n = pop.pop_size // 3
    if keep_n < 1:
        raise InvalidConfigurationError(
            f"cull would leave no survivors (keep_n={keep_n}, pop_size={pop.pop_size})"
        )
    return replace(pop, members=pop.members[:keep_n])


def breed(pop: Population) -> Creature:
    """Produce one offspring from a culled population.

    The fittest member is always one parent; the other is drawn at random
    from the remaining survivors.
    """
    fittest = pop.members[0]
    others = pop.members[1:] or pop.members
    other = others[int(pop.rng.integers(len(others)))]
    return fittest.cross_breed(other).mutate()


def regenerate(pop: Population) -> Population:
    """Rebuild a (probably just-culled) population up to size.

    Survivors age by one, offspring fill the gap, everyone is scored and the
    result is sorted best first.
    """
    if not pop.members:
        raise InvalidConfigurationError("Cannot regenerate a population with no members")

    survivors = [replace(m, age=m.age + 1) for m in pop.members]
    offspring = [breed(pop) for _ in range(pop.pop_size - len(survivors))]

    scored = [c.calculate_fitness(pop.env) for c in survivors + offspring]
    scored.sort(key=lambda c: c.get_fitness())

    return replace(pop, members=tuple(scored), generation=pop.generation + 1)


def iterate_population(pop: Population, hook: Hook) -> Population:
    """Run a single cull/regenerate cycle and report it to ``hook``."""
    new_pop = regenerate(cull(pop))
    logger.debug(
        "Generation %d: best fitness %s, %d members",
        new_pop.generation,
        new_pop.members[0].get_fitness(),
        len(new_pop.members),
    )
    hook(new_pop)
    return new_pop


def run_population(start_pop: Population, hook: Hook) -> Iterator[Population]:
    """Yield successive generations forever, calling ``hook`` for each.

    Nothing runs until the caller pulls; stop pulling to stop evolving.
    """
    pop = start_pop
    while True:
        pop = iterate_population(pop, hook)
        yield pop
