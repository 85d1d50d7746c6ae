from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from traitevo.evolution.environment import EnvironmentDeltas
from traitevo.evolution.fitness import FitnessWeights
from traitevo.exceptions import ConfigError


class EngineConfig(BaseModel):
    """Configuration options controlling EvolutionEngine behaviour."""

    population_size: int = Field(default=50, gt=0)
    genome_length: int = Field(default=128, gt=0)
    mutation_rate: float = Field(default=0.15, ge=0.0, le=1.0)
    crossover_rate: float = Field(default=0.8, ge=0.0, le=1.0)
    elitism_rate: float = Field(default=0.1, ge=0.0, lt=1.0)
    tournament_size: int = Field(default=5, gt=0)
    environment_interval: int = Field(
        default=10, gt=0, description="Generations between pressure resampling"
    )
    pressure_probability: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Chance each catalog pressure is active after resampling",
    )
    max_pressures: int = Field(default=3, ge=0)
    fitness_weights: FitnessWeights = Field(default_factory=FitnessWeights)
    environment_deltas: EnvironmentDeltas = Field(default_factory=EnvironmentDeltas)

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)


def build_config(config: EngineConfig | Mapping[str, Any] | None = None) -> EngineConfig:
    """Validate *config* into an EngineConfig, raising ConfigError on bad input."""
    if isinstance(config, EngineConfig):
        return config
    try:
        return EngineConfig.model_validate(dict(config or {}))
    except ValidationError as exc:
        raise ConfigError(f"Invalid engine configuration: {exc}") from exc
