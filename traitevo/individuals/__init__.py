from traitevo.individuals.codec import Genome, decode
from traitevo.individuals.individual import (
    AdaptiveState,
    EvolutionRecord,
    Individual,
    PerformanceMetrics,
    new_individual_id,
)
from traitevo.individuals.traits import Easing, TraitSet

__all__ = [
    "AdaptiveState",
    "Easing",
    "EvolutionRecord",
    "Genome",
    "Individual",
    "PerformanceMetrics",
    "TraitSet",
    "decode",
    "new_individual_id",
]
