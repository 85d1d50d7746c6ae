from __future__ import annotations

import random

from loguru import logger
from pydantic import BaseModel, Field

from traitevo.evolution.environment import Pressure
from traitevo.evolution.fitness import FitnessEvaluator
from traitevo.evolution.mutation.crossover import CrossoverOperator, clone_offspring
from traitevo.evolution.mutation.mutation_operator import MutationOperator
from traitevo.evolution.strategies.elite_selectors import (
    EliteSelector,
    rank_by_fitness,
)
from traitevo.evolution.strategies.parent_selector import ParentSelector
from traitevo.individuals.individual import Individual


class StepReport(BaseModel):
    """What happened during one generation step."""

    generation: int = Field(ge=0, description="Generation the new population belongs to")
    best_fitness: float = Field(ge=0.0, le=1.0)
    elites: int = Field(default=0, ge=0)
    crossovers: int = Field(default=0, ge=0)
    clones: int = Field(default=0, ge=0)
    mutated: int = Field(default=0, ge=0)
    genes_mutated: int = Field(default=0, ge=0)


class PopulationManager:
    """
    Holds one generation and replaces it with the next:
    Evaluate -> Rank -> Select Elite -> Reproduce -> Replace.
    """

    def __init__(
        self,
        *,
        size: int,
        elites_per_generation: int,
        crossover_rate: float,
        evaluator: FitnessEvaluator,
        elite_selector: EliteSelector,
        parent_selector: ParentSelector,
        crossover: CrossoverOperator,
        mutator: MutationOperator,
    ):
        if size < 1:
            raise ValueError(f"size must be at least 1, got {size}")
        if not 0 <= elites_per_generation < size:
            raise ValueError(
                f"elites_per_generation must be in [0, {size}), got {elites_per_generation}"
            )
        self.size = size
        self.elites_per_generation = elites_per_generation
        self.crossover_rate = crossover_rate
        self.evaluator = evaluator
        self.elite_selector = elite_selector
        self.parent_selector = parent_selector
        self.crossover = crossover
        self.mutator = mutator

        self.individuals: list[Individual] = []

    def seed(self, rng: random.Random, genome_length: int) -> None:
        self.individuals = [
            Individual.sample(rng, genome_length) for _ in range(self.size)
        ]
        logger.info(
            "[PopulationManager] Seeded {} individuals (genome_length={})",
            self.size,
            genome_length,
        )

    def find(self, individual_id: str) -> Individual | None:
        for individual in self.individuals:
            if individual.id == individual_id:
                return individual
        return None

    def evaluate(self, pressures: tuple[Pressure, ...]) -> None:
        for individual in self.individuals:
            individual.fitness = self.evaluator(individual, pressures)

    def step(
        self,
        rng: random.Random,
        pressures: tuple[Pressure, ...],
        generation: int,
    ) -> StepReport:
        """Run one full generation and install the next population.

        *generation* is the index the new population is born into.
        """
        self.evaluate(pressures)
        ranked = rank_by_fitness(self.individuals)

        elites = self.elite_selector(ranked, self.elites_per_generation)
        next_population: list[Individual] = list(elites)
        report = StepReport(
            generation=generation,
            best_fitness=ranked[0].fitness,
            elites=len(elites),
        )

        parents = self.parent_selector.create_parent_iterator(ranked, rng)
        while len(next_population) < self.size:
            parent1, parent2 = next(parents)

            if rng.random() < self.crossover_rate:
                offspring = self.crossover(parent1, parent2, rng, generation)
                report.crossovers += 1
            else:
                offspring = clone_offspring(parent1, rng, generation)
                report.clones += 1

            if self.mutator.should_mutate(offspring, rng):
                report.genes_mutated += self.mutator.mutate(
                    offspring, rng, generation, pressures
                )
                report.mutated += 1

            next_population.append(offspring)

        if len(next_population) != self.size:
            raise AssertionError(
                f"Population size drifted: {len(next_population)} != {self.size}"
            )
        self.individuals = next_population

        logger.debug(
            "[PopulationManager] Gen {} | best={:.4f} elites={} crossovers={} clones={} mutated={} genes={}",
            generation,
            report.best_fitness,
            report.elites,
            report.crossovers,
            report.clones,
            report.mutated,
            report.genes_mutated,
        )
        return report
