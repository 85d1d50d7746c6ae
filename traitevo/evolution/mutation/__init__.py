from traitevo.evolution.mutation.crossover import (
    CrossoverOperator,
    clone_offspring,
    crossover_genomes,
)
from traitevo.evolution.mutation.mutation_operator import (
    AdaptiveMutationOperator,
    MutationOperator,
)

__all__ = [
    "AdaptiveMutationOperator",
    "CrossoverOperator",
    "MutationOperator",
    "clone_offspring",
    "crossover_genomes",
]
