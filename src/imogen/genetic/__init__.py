"""Genetic machinery: genomes, creatures and populations."""

from imogen.genetic.genome import (
    MUTATORS,
    append_rand,
    change_rand,
    crossover,
    drop_rand,
    insert_rand,
    mutate,
    random_genome,
)
from imogen.genetic.creature import (
    Creature,
    Evolving,
    cross_breed,
    polygonal_creature,
)
from imogen.genetic.population import (
    Population,
    cull,
    iterate_population,
    population,
    regenerate,
    run_population,
)

__all__ = [
    "MUTATORS",
    "append_rand",
    "change_rand",
    "crossover",
    "drop_rand",
    "insert_rand",
    "mutate",
    "random_genome",
    "Creature",
    "Evolving",
    "cross_breed",
    "polygonal_creature",
    "Population",
    "cull",
    "iterate_population",
    "population",
    "regenerate",
    "run_population",
]
