from __future__ import annotations

import random
from typing import Callable, NamedTuple

from loguru import logger

from traitevo.individuals.bounds import clamp_unit, signed_uniform
from traitevo.individuals.codec import Genome, decode
from traitevo.individuals.individual import (
    AdaptiveState,
    Individual,
    PerformanceMetrics,
    new_individual_id,
)

# Per-gene inheritance split: below 0.4 parent1, below 0.8 parent2, else blend.
PARENT1_SHARE = 0.4
PARENT2_SHARE = 0.8
BLEND_JITTER = 0.05


def _max(a: float, b: float) -> float:
    return max(a, b)


def _mean(a: float, b: float) -> float:
    return (a + b) / 2


class InheritanceRule(NamedTuple):
    combine: Callable[[float, float], float]
    noise_low: float = 0.0
    noise_high: float = 0.0

    def apply(self, a: float, b: float, rng: random.Random) -> float:
        value = self.combine(a, b)
        if self.noise_low or self.noise_high:
            value += self.noise_low + rng.random() * (self.noise_high - self.noise_low)
        return clamp_unit(value)


PERFORMANCE_INHERITANCE: dict[str, InheritanceRule] = {
    "engagement": InheritanceRule(_max, -0.05, 0.05),
    "appeal": InheritanceRule(_mean, -0.05, 0.05),
    "effectiveness": InheritanceRule(_max),
    "adaptation_success": InheritanceRule(_mean),
    "resonance": InheritanceRule(_max, 0.0, 0.05),
    "coherence": InheritanceRule(_mean, -0.05, 0.05),
}

ADAPTIVE_INHERITANCE: dict[str, InheritanceRule] = {
    "awareness": InheritanceRule(_mean, 0.0, 0.1),
    "self_modification": InheritanceRule(_max, 0.0, 0.05),
    "foresight": InheritanceRule(_mean, 0.0, 0.08),
    "creativity": InheritanceRule(_max, 0.0, 0.1),
    "empathy": InheritanceRule(_mean, 0.0, 0.06),
    "insight": InheritanceRule(_max, 0.0, 0.02),
}


def crossover_genomes(parent1: Genome, parent2: Genome, rng: random.Random) -> Genome:
    if len(parent1) != len(parent2):
        raise ValueError(
            f"Parent genomes differ in length: {len(parent1)} vs {len(parent2)}"
        )
    child = []
    for g1, g2 in zip(parent1, parent2):
        r = rng.random()
        if r < PARENT1_SHARE:
            child.append(g1)
        elif r < PARENT2_SHARE:
            child.append(g2)
        else:
            child.append(clamp_unit((g1 + g2) / 2 + signed_uniform(rng, BLEND_JITTER)))
    return tuple(child)


def _inherit(rules: dict[str, InheritanceRule], a, b, rng: random.Random) -> dict[str, float]:
    return {
        name: rule.apply(getattr(a, name), getattr(b, name), rng)
        for name, rule in rules.items()
    }


class CrossoverOperator:
    """Combine two parents into a new individual that records both parent ids."""

    def __call__(
        self,
        parent1: Individual,
        parent2: Individual,
        rng: random.Random,
        generation: int,
    ) -> Individual:
        genome = crossover_genomes(parent1.genome, parent2.genome, rng)
        child = Individual(
            id=new_individual_id(rng),
            genome=genome,
            generation=generation,
            parent_ids=[parent1.id, parent2.id],
            traits=decode(genome),
            performance=PerformanceMetrics(
                **_inherit(
                    PERFORMANCE_INHERITANCE,
                    parent1.performance,
                    parent2.performance,
                    rng,
                )
            ),
            adaptive_state=AdaptiveState(
                **_inherit(
                    ADAPTIVE_INHERITANCE,
                    parent1.adaptive_state,
                    parent2.adaptive_state,
                    rng,
                )
            ),
        )
        logger.trace(
            "[Crossover] {} x {} -> {}", parent1.id, parent2.id, child.id
        )
        return child


def clone_offspring(
    parent: Individual, rng: random.Random, generation: int
) -> Individual:
    """Deep copy of *parent* under a fresh id, born into *generation*; parentage is left as is."""
    return parent.model_copy(
        deep=True,
        update={"id": new_individual_id(rng), "generation": generation},
    )
