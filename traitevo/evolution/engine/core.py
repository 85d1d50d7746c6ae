from __future__ import annotations

from collections.abc import Mapping
import random
import threading
from typing import Any, NamedTuple

from loguru import logger

from traitevo.evolution.engine.config import EngineConfig, build_config
from traitevo.evolution.engine.metrics import EngineMetrics, EngineStats
from traitevo.evolution.environment import EnvironmentState
from traitevo.evolution.feedback import InteractionEvent, apply_interaction
from traitevo.evolution.fitness import FitnessEvaluator
from traitevo.evolution.mutation.crossover import CrossoverOperator
from traitevo.evolution.mutation.mutation_operator import AdaptiveMutationOperator
from traitevo.evolution.population import PopulationManager
from traitevo.evolution.strategies.elite_selectors import (
    TopEliteSelector,
    elite_count,
    rank_by_fitness,
)
from traitevo.evolution.strategies.parent_selector import TournamentParentSelector
from traitevo.exceptions import EvolutionError, UnknownIndividualError
from traitevo.individuals.individual import Individual
from traitevo.individuals.traits import TraitSet

__all__ = ["EvolutionEngine", "RankedIndividual"]


class RankedIndividual(NamedTuple):
    id: str
    fitness: float
    traits: TraitSet


class _Published(NamedTuple):
    individuals: tuple[Individual, ...]
    ranking: tuple[RankedIndividual, ...]
    stats: EngineStats


class EvolutionEngine:
    """
    Generation-at-a-time evolution over a fixed-size population.

    - All writes (``tick``, ``report_interaction``) hold one exclusive lock.
    - After every write an immutable snapshot is published; ``top_k``,
      ``stats`` and ``individuals`` read it without locking.
    - The engine owns no timer. Callers drive ``tick`` themselves or through
      ``EvolutionRunner``.
    """

    def __init__(
        self,
        config: EngineConfig | Mapping[str, Any] | None = None,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
    ):
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self.config = build_config(config)
        self.rng = rng if rng is not None else random.Random(seed)

        cfg = self.config
        self.evaluator = FitnessEvaluator(cfg.fitness_weights, cfg.environment_deltas)
        self.environment = EnvironmentState(
            interval=cfg.environment_interval,
            probability=cfg.pressure_probability,
            max_active=cfg.max_pressures,
        )
        self.population = PopulationManager(
            size=cfg.population_size,
            elites_per_generation=elite_count(cfg.population_size, cfg.elitism_rate),
            crossover_rate=cfg.crossover_rate,
            evaluator=self.evaluator,
            elite_selector=TopEliteSelector(),
            parent_selector=TournamentParentSelector(cfg.tournament_size),
            crossover=CrossoverOperator(),
            mutator=AdaptiveMutationOperator(cfg.mutation_rate),
        )

        self.metrics = EngineMetrics()
        self._generation = 0
        self._fitness_history: list[float] = []
        self._lock = threading.RLock()

        self.population.seed(self.rng, cfg.genome_length)
        self.population.evaluate(self.environment.active)
        self._published = _Published((), (), EngineStats())
        self._publish()

        logger.info(
            "[EvolutionEngine] Init | population={}, genome_length={}, mutation={}, crossover={}, elites={}",
            cfg.population_size,
            cfg.genome_length,
            cfg.mutation_rate,
            cfg.crossover_rate,
            self.population.elites_per_generation,
        )

    # -------------------------- Writes --------------------------

    def tick(self) -> None:
        """Advance exactly one generation."""
        with self._lock:
            next_generation = self._generation + 1
            try:
                report = self.population.step(
                    self.rng, self.environment.active, next_generation
                )
            except Exception as exc:
                raise EvolutionError(
                    f"Generation {next_generation} failed: {exc}"
                ) from exc

            self._generation = next_generation
            self._fitness_history.append(report.best_fitness)
            self.metrics.record_step_metrics(
                report.crossovers, report.clones, report.mutated, report.genes_mutated
            )

            if self.environment.maybe_adapt(self._generation, self.rng):
                self.metrics.environment_shifts += 1
                logger.info(
                    "[EvolutionEngine] Gen {} | pressures -> {}",
                    self._generation,
                    [p.value for p in self.environment.active] or "none",
                )

            # Stored fitness always reflects the current population and pressures.
            self.population.evaluate(self.environment.active)
            self._publish()

        logger.debug(
            "[EvolutionEngine] Gen {} done | best={:.4f} avg={:.4f}",
            self._published.stats.generation,
            self._published.stats.best_fitness,
            self._published.stats.average_fitness,
        )

    def report_interaction(self, individual_id: str, event: InteractionEvent) -> None:
        """Apply an interaction event to an individual of the current population."""
        with self._lock:
            individual = self.population.find(individual_id)
            if individual is None:
                logger.warning(
                    "[EvolutionEngine] Interaction {} for unknown id {}",
                    type(event).__name__,
                    individual_id,
                )
                raise UnknownIndividualError(individual_id)

            apply_interaction(individual, event)
            self.metrics.interactions += 1
            self._republish_one(individual)

    # -------------------------- Reads --------------------------

    def top_k(self, k: int) -> list[RankedIndividual]:
        """The *k* fittest individuals, best first (``k`` clamped to the population size)."""
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        return list(self._published.ranking[:k])

    def stats(self) -> EngineStats:
        return self._published.stats

    def individuals(self) -> tuple[Individual, ...]:
        """Fresh copies of the published population; edits have no effect on the engine."""
        return tuple(ind.model_copy(deep=True) for ind in self._published.individuals)

    @property
    def generation(self) -> int:
        return self._published.stats.generation

    # -------------------------- Internals --------------------------

    def _publish(self) -> None:
        self._set_published(
            tuple(ind.model_copy(deep=True) for ind in self.population.individuals)
        )

    def _republish_one(self, individual: Individual) -> None:
        copy = individual.model_copy(deep=True)
        self._set_published(
            tuple(
                copy if ind.id == individual.id else ind
                for ind in self._published.individuals
            )
        )

    def _set_published(self, individuals: tuple[Individual, ...]) -> None:
        # Published individuals are never handed out or mutated after this point.
        ranking = tuple(
            RankedIndividual(ind.id, ind.fitness, ind.traits)
            for ind in rank_by_fitness(list(individuals))
        )
        self._published = _Published(
            individuals, ranking, self._compute_stats(individuals)
        )

    def _compute_stats(self, individuals: tuple[Individual, ...]) -> EngineStats:
        n = len(individuals)
        return EngineStats(
            generation=self._generation,
            population_size=n,
            average_fitness=sum(i.fitness for i in individuals) / n,
            best_fitness=max(i.fitness for i in individuals),
            average_cognitive_score=sum(i.cognitive_score for i in individuals) / n,
            active_pressures=tuple(p.value for p in self.environment.active),
            total_mutations=sum(i.mutation_count for i in individuals),
            fitness_history=tuple(self._fitness_history),
        )

    def get_status(self) -> dict[str, object]:
        """Light, non-blocking status for UIs/health checks."""
        return {**self._published.stats.model_dump(), **self.metrics.to_dict()}
