"""Multi-criteria fitness: a fixed weighted sum of sub-scores, clamped to [0, 1]."""

from __future__ import annotations

import math
from collections.abc import Sequence

from loguru import logger
from pydantic import BaseModel, Field

from traitevo.evolution.environment import (
    EnvironmentDeltas,
    Pressure,
    adaptation_score,
)
from traitevo.individuals.bounds import clamp_unit
from traitevo.individuals.individual import Individual

DIVERSITY_BUCKETS = 10


class FitnessWeights(BaseModel):
    """Weights of each sub-score in the final fitness."""

    aesthetic: float = Field(default=0.25, ge=0.0)
    functional: float = Field(default=0.25, ge=0.0)
    cognitive: float = Field(default=0.15, ge=0.0)
    coherence: float = Field(default=0.10, ge=0.0)
    diversity: float = Field(default=0.10, ge=0.0)
    environment: float = Field(default=0.10, ge=0.0)
    adaptive_bonus: float = Field(default=0.05, ge=0.0)


class FitnessBreakdown(BaseModel):
    aesthetic: float
    functional: float
    cognitive: float
    coherence: float
    diversity: float
    environment: float
    adaptive_bonus: float
    total: float


def genome_entropy(genome: Sequence[float], buckets: int = DIVERSITY_BUCKETS) -> float:
    """Shannon entropy of a *buckets*-bin histogram of gene values, normalized to [0, 1].

    Empty bins contribute nothing; a genome whose genes all share one bin scores 0.
    """
    if not genome or buckets < 2:
        return 0.0
    counts = [0] * buckets
    for gene in genome:
        counts[min(int(gene * buckets), buckets - 1)] += 1

    total = len(genome)
    entropy = 0.0
    for count in counts:
        if count == 0:
            continue
        p = count / total
        entropy -= p * math.log2(p)
    return clamp_unit(entropy / math.log2(buckets))


class FitnessEvaluator:
    def __init__(
        self,
        weights: FitnessWeights | None = None,
        deltas: EnvironmentDeltas | None = None,
    ):
        self.weights = weights or FitnessWeights()
        self.deltas = deltas or EnvironmentDeltas()

    def breakdown(
        self, individual: Individual, pressures: tuple[Pressure, ...] = ()
    ) -> FitnessBreakdown:
        perf = individual.performance
        w = self.weights

        aesthetic = (perf.appeal + perf.engagement) / 2
        functional = (perf.effectiveness + perf.adaptation_success) / 2
        cognitive = individual.cognitive_score
        coherence = perf.coherence
        diversity = genome_entropy(individual.genome)
        environment = adaptation_score(individual.traits, pressures, self.deltas)
        adaptive_bonus = cognitive * 2

        total = (
            aesthetic * w.aesthetic
            + functional * w.functional
            + cognitive * w.cognitive
            + coherence * w.coherence
            + diversity * w.diversity
            + environment * w.environment
            + adaptive_bonus * w.adaptive_bonus
        )
        return FitnessBreakdown(
            aesthetic=aesthetic,
            functional=functional,
            cognitive=cognitive,
            coherence=coherence,
            diversity=diversity,
            environment=environment,
            adaptive_bonus=adaptive_bonus,
            total=clamp_unit(total),
        )

    def __call__(
        self, individual: Individual, pressures: tuple[Pressure, ...] = ()
    ) -> float:
        result = self.breakdown(individual, pressures)
        logger.trace(
            "[FitnessEvaluator] {} -> {:.4f}", individual.id, result.total
        )
        return result.total
