"""traitevo: population-based evolutionary optimization over decoded trait genomes."""

from traitevo.evolution.engine import (
    EngineConfig,
    EngineStats,
    EvolutionEngine,
    RankedIndividual,
)
from traitevo.evolution.feedback import Click, Gesture, Hover, Proximity
from traitevo.exceptions import (
    ConfigError,
    EvolutionError,
    TraitEvoError,
    UnknownIndividualError,
)
from traitevo.individuals import TraitSet, decode

__version__ = "0.1.0"

__all__ = [
    "Click",
    "ConfigError",
    "EngineConfig",
    "EngineStats",
    "EvolutionEngine",
    "EvolutionError",
    "Gesture",
    "Hover",
    "Proximity",
    "RankedIndividual",
    "TraitEvoError",
    "TraitSet",
    "UnknownIndividualError",
    "decode",
]
