from __future__ import annotations

from abc import ABC, abstractmethod
import random

from loguru import logger

from traitevo.evolution.environment import Pressure
from traitevo.individuals.bounds import clamp_unit, signed_uniform
from traitevo.individuals.individual import AdaptiveState, EvolutionRecord, Individual

GENE_STEP = 0.1
CREATIVE_STEP = 0.1
# Meta-trait nudges are (U(0,1) - bias) * scale, i.e. skewed upwards.
META_NUDGE_BIAS = 0.3
META_NUDGE_SCALE = 0.1


class MutationOperator(ABC):
    @abstractmethod
    def should_mutate(self, individual: Individual, rng: random.Random) -> bool:
        """Decide whether a fresh offspring gets mutated."""

    @abstractmethod
    def mutate(
        self,
        individual: Individual,
        rng: random.Random,
        generation: int,
        pressures: tuple[Pressure, ...] = (),
    ) -> int:
        """Mutate *individual* in place. Returns the number of perturbed genes."""


class AdaptiveMutationOperator(MutationOperator):
    """Gene perturbation whose strength scales with the individual's self-modification."""

    def __init__(self, mutation_rate: float):
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1], got {mutation_rate}")
        self.mutation_rate = mutation_rate

    def strength(self, individual: Individual) -> float:
        return self.mutation_rate * (1 + individual.adaptive_state.self_modification)

    def should_mutate(self, individual: Individual, rng: random.Random) -> bool:
        return (
            rng.random() < self.mutation_rate
            or individual.adaptive_state.self_modification > 0.5
        )

    def mutate(
        self,
        individual: Individual,
        rng: random.Random,
        generation: int,
        pressures: tuple[Pressure, ...] = (),
    ) -> int:
        state = individual.adaptive_state
        strength = self.strength(individual)
        creativity = state.creativity

        genome = list(individual.genome)
        mutated_genes: list[int] = []
        for i, gene in enumerate(genome):
            if rng.random() < strength:
                step = signed_uniform(rng, GENE_STEP) + signed_uniform(rng, CREATIVE_STEP) * creativity
                genome[i] = clamp_unit(gene + step)
                mutated_genes.append(i)

        nudged: str | None = None
        if rng.random() < state.self_modification:
            names = list(AdaptiveState.model_fields)
            nudged = names[rng.randrange(len(names))]
            delta = (rng.random() - META_NUDGE_BIAS) * META_NUDGE_SCALE
            state.nudge(nudged, delta)
            logger.trace("[Mutation] {} nudged {} by {:+.3f}", individual.id, nudged, delta)

        individual.set_genome(tuple(genome))
        individual.mutation_count += len(mutated_genes)
        individual.generation = generation
        individual.history.append(
            EvolutionRecord(
                generation=generation,
                mutated_genes=tuple(mutated_genes),
                nudged_trait=nudged,
                parent_ids=tuple(individual.parent_ids),
                pressures=tuple(p.value for p in pressures),
            )
        )
        return len(mutated_genes)
