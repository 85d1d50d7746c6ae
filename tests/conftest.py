import random

import pytest

from traitevo.evolution.engine import EvolutionEngine
from traitevo.individuals.codec import decode
from traitevo.individuals.individual import (
    AdaptiveState,
    Individual,
    PerformanceMetrics,
    new_individual_id,
)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def small_config():
    return {
        "population_size": 10,
        "genome_length": 16,
        "mutation_rate": 0.15,
        "crossover_rate": 0.8,
        "elitism_rate": 0.2,
    }


@pytest.fixture
def engine(small_config):
    return EvolutionEngine(small_config, seed=42)


def make_individual(
    rng,
    genome=(0.0,) * 30,
    performance=None,
    adaptive_state=None,
    **kwargs,
):
    """Build an Individual with explicit genome and scalars."""
    genome = tuple(genome)
    return Individual(
        id=new_individual_id(rng),
        genome=genome,
        traits=decode(genome),
        performance=performance or PerformanceMetrics(),
        adaptive_state=adaptive_state or AdaptiveState(),
        **kwargs,
    )


@pytest.fixture
def individual_factory(rng):
    def _factory(**kwargs):
        return make_individual(rng, **kwargs)

    return _factory
