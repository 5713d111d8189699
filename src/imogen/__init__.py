"""Imogen - evolve stacks of translucent polygons to approximate an image."""

__version__ = "0.1.0"

from imogen.drawing.fitness import Environment
from imogen.drawing.phenotype import Polygon, polygons
from imogen.genetic.creature import Creature, polygonal_creature
from imogen.genetic.population import Population, population, run_population
from imogen.session import SimulationSession

__all__ = [
    "Environment",
    "Polygon",
    "polygons",
    "Creature",
    "polygonal_creature",
    "Population",
    "population",
    "run_population",
    "SimulationSession",
]
