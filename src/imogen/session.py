"""Simulation session: owns the state of one evolution run.

The session holds the settings, the current population, the history of
past generations and the worker thread that pulls generations in the
background. Front ends (the CLI, or a GUI) talk to a session instead of
sharing module-level state.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Union

import numpy as np
from PIL import Image

from imogen.config import Settings
from imogen.drawing.fitness import Environment, Rasterizer
from imogen.drawing.rasterizer import rasterize
from imogen.genetic.creature import Creature, polygonal_creature
from imogen.genetic.population import Population, population, run_population
from imogen.imaging import load_target_image, make_environment, save_creature_image, scale_to_width

logger = logging.getLogger(__name__)

Listener = Callable[[Population], None]


@dataclass
class GenerationRecord:
    """Summary of one generation, kept in the session history."""

    generation: int
    best_fitness: int
    mean_fitness: float
    best_length: int

    def to_dict(self) -> Dict[str, Union[int, float]]:
        return {
            'generation': self.generation,
            'best_fitness': self.best_fitness,
            'mean_fitness': self.mean_fitness,
            'best_length': self.best_length,
        }


class SimulationSession:
    """Explicit owner of a run: target, population, worker and history."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rasterizer: Rasterizer = rasterize,
    ):
        self.settings = (settings or Settings()).validate()
        self.rasterizer = rasterizer
        self.rng = np.random.default_rng(self.settings.seed)

        self.environment: Optional[Environment] = None
        self.population: Optional[Population] = None
        self.history: List[GenerationRecord] = []
        self.listeners: List[Listener] = []

        self._lock = threading.Lock()
        self._control = threading.Lock()
        self._running = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self._generations: Optional[Iterator[Population]] = None

    # Target and population

    def load_target(self, target: Union[str, Path, Image.Image]) -> Environment:
        """Stop any run and start a fresh population against a new target."""
        self.stop()
        self.join()

        if isinstance(target, Image.Image):
            image = scale_to_width(target, self.settings.render_width)
        else:
            image = load_target_image(target, self.settings.render_width)

        self.environment = make_environment(
            image,
            max_age=self.settings.max_age,
            rasterizer=self.rasterizer,
        )
        self.restart()
        return self.environment

    def new_creature(self) -> Creature:
        return polygonal_creature(self.settings.num_genes, rng=self.rng)

    def restart(self) -> Population:
        """Throw away the current lineage and seed a new one."""
        if self.environment is None:
            raise RuntimeError("No target loaded")
        if self.is_running:
            raise RuntimeError("Stop the session before restarting it")

        with self._lock:
            self.population = population(
                self.new_creature,
                self.environment,
                self.settings.population_size,
                rng=self.rng,
            )
            self.history = []
            self._generations = None
        logger.info(
            f"New population of {self.settings.population_size} creatures "
            f"with {self.settings.num_genes} genes"
        )
        return self.population

    def best(self) -> Optional[Creature]:
        return self.population.best if self.population else None

    # Evolution

    def population_hook(self, new_pop: Population) -> None:
        """Record a freshly produced generation. Runs on the evolving thread."""
        fitnesses = new_pop.fitnesses()
        best = new_pop.members[0]
        record = GenerationRecord(
            generation=new_pop.generation,
            best_fitness=best.get_fitness(),
            mean_fitness=float(np.mean(fitnesses)),
            best_length=len(best.genome),
        )
        with self._lock:
            self.population = new_pop
            self.history.append(record)

        logger.debug(
            f"Generation {record.generation}: best {record.best_fitness}, "
            f"mean {record.mean_fitness:.1f}, length {record.best_length}"
        )
        for listener in self.listeners:
            listener(new_pop)

    def _pull(self) -> Population:
        if self._generations is None:
            if self.population is None:
                raise RuntimeError("No target loaded")
            self._generations = run_population(self.population, self.population_hook)
        return next(self._generations)

    def step(self, generations: int = 1) -> Population:
        """Evolve ``generations`` cycles on the calling thread."""
        if self.is_running:
            raise RuntimeError("Session is already evolving in the background")
        pop = self.population
        for _ in range(generations):
            pop = self._pull()
        return pop

    def _run_loop(self, running: threading.Event) -> None:
        # Each worker owns its flag, so a finishing worker cannot clear a newer run.
        try:
            while running.is_set():
                self._pull()
        except Exception:
            logger.exception("Evolution loop failed")
            raise
        finally:
            running.clear()

    @property
    def is_running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def start(self) -> None:
        """Evolve on a background thread until ``stop`` is called."""
        if self.population is None:
            raise RuntimeError("No target loaded")
        with self._control:
            if self.is_running:
                if self._running.is_set():
                    logger.debug("Start ignored, evolution is already running")
                    return
                # Stopped but still finishing its last generation
                self._worker.join()

            running = threading.Event()
            running.set()
            self._running = running
            self._worker = threading.Thread(
                target=self._run_loop,
                args=(running,),
                name="imogen-evolution",
                daemon=True,
            )
            self._worker.start()
        logger.info("Evolution started")

    def stop(self) -> None:
        """Ask the worker to stop after the generation it is working on."""
        if self._running.is_set():
            self._running.clear()
            logger.info("Evolution stopping")

    def join(self, timeout: Optional[float] = None) -> None:
        if self._worker is not None:
            self._worker.join(timeout)

    def play_pause(self) -> bool:
        """Toggle evolution; returns True if now running."""
        if self._running.is_set():
            self.stop()
            return False
        self.start()
        return True

    # Reporting

    def status(self) -> Dict[str, object]:
        pop = self.population
        if pop is None or pop.best is None or pop.best.get_fitness() is None:
            return {}
        best = pop.best
        return {
            'generation': pop.generation,
            'ages': [m.age for m in pop.members],
            'best_fitness': best.get_fitness(),
            'best_length': len(best.genome),
            'avg_pixel_error': best.get_fitness() // pop.env.num_pixels,
        }

    def describe(self) -> str:
        """Status as the multi-line text shown to users."""
        status = self.status()
        if not status:
            return "No generations yet"
        return "\n".join([
            f"Generation:\t{status['generation']}",
            f"Ages:\t{','.join(str(a) for a in status['ages'])}",
            f"Best Fitness:\t{status['best_fitness']}",
            f"Best Length:\t{status['best_length']}",
            f"Avg px Error:\t{status['avg_pixel_error']}",
        ])

    def save_best(self, path: Union[str, Path]) -> Optional[Path]:
        """Render the current best creature at the output width."""
        best = self.best()
        if best is None or self.environment is None:
            return None
        return save_creature_image(best, self.environment, path, self.settings.output_width)
