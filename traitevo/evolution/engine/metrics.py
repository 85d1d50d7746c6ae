from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EngineStats(BaseModel):
    """Snapshot of the population after the latest generation step."""

    generation: int = Field(default=0, ge=0)
    population_size: int = Field(default=0, ge=0)
    average_fitness: float = Field(default=0.0, ge=0.0, le=1.0)
    best_fitness: float = Field(default=0.0, ge=0.0, le=1.0)
    average_cognitive_score: float = Field(default=0.0, ge=0.0, le=1.0)
    active_pressures: tuple[str, ...] = Field(default=())
    total_mutations: int = Field(
        default=0, ge=0, description="Sum of mutation counts over the population"
    )
    fitness_history: tuple[float, ...] = Field(
        default=(), description="Best evaluated fitness per completed generation"
    )

    model_config = ConfigDict(frozen=True)


class EngineMetrics(BaseModel):
    """Lifetime counters (not reset by population replacement)."""

    total_generations: int = Field(
        default=0, description="Total number of generations run"
    )
    crossovers: int = Field(default=0, description="Offspring produced by crossover")
    clones: int = Field(default=0, description="Offspring produced by cloning")
    mutations_applied: int = Field(
        default=0, description="Offspring that went through mutation"
    )
    genes_mutated: int = Field(default=0, description="Total genes perturbed")
    interactions: int = Field(default=0, description="Interaction events applied")
    environment_shifts: int = Field(
        default=0, description="Times the pressure set was resampled"
    )

    def record_step_metrics(
        self, crossovers: int, clones: int, mutated: int, genes_mutated: int
    ) -> None:
        """Record metrics from one generation step."""
        self.total_generations += 1
        self.crossovers += crossovers
        self.clones += clones
        self.mutations_applied += mutated
        self.genes_mutated += genes_mutated

    def to_dict(self) -> dict[str, int]:
        return self.model_dump()
