from __future__ import annotations

import random
import uuid
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traitevo.individuals.bounds import UnitFloat, clamp_unit
from traitevo.individuals.codec import Genome, decode
from traitevo.individuals.traits import TraitSet


class _UnitScalars(BaseModel):
    """Fixed set of [0, 1] scalars; assignments are validated."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    def scalars(self) -> list[float]:
        return [getattr(self, name) for name in type(self).model_fields]

    def mean(self) -> float:
        vals = self.scalars()
        return sum(vals) / len(vals)

    def nudge(self, name: str, delta: float) -> float:
        """Add *delta* to field *name*, clamped to [0, 1]. Returns the new value."""
        value = clamp_unit(getattr(self, name) + delta)
        setattr(self, name, value)
        return value


class PerformanceMetrics(_UnitScalars):
    engagement: UnitFloat = 0.0
    appeal: UnitFloat = 0.0
    effectiveness: UnitFloat = 0.0
    adaptation_success: UnitFloat = 0.0
    resonance: UnitFloat = 0.0
    coherence: UnitFloat = 0.0

    @classmethod
    def sample(cls, rng: random.Random) -> PerformanceMetrics:
        return cls(**{name: rng.random() for name in cls.model_fields})


class AdaptiveState(_UnitScalars):
    """Self-modification propensity and related meta-traits."""

    awareness: UnitFloat = 0.0
    self_modification: UnitFloat = 0.0
    foresight: UnitFloat = 0.0
    creativity: UnitFloat = 0.0
    empathy: UnitFloat = 0.0
    insight: UnitFloat = 0.0

    # New individuals start with low meta-traits.
    INITIAL_CEILINGS: ClassVar[dict[str, float]] = {
        "awareness": 0.3,
        "self_modification": 0.2,
        "foresight": 0.1,
        "creativity": 0.1,
        "empathy": 0.2,
        "insight": 0.05,
    }

    @classmethod
    def sample(cls, rng: random.Random) -> AdaptiveState:
        return cls(
            **{
                name: rng.random() * ceiling
                for name, ceiling in cls.INITIAL_CEILINGS.items()
            }
        )


class EvolutionRecord(BaseModel):
    """One mutation event in an individual's lineage."""

    generation: int = Field(ge=0, description="Generation the mutation happened in")
    mutated_genes: tuple[int, ...] = Field(
        default=(), description="Indices of the perturbed genes"
    )
    nudged_trait: str | None = Field(
        default=None, description="AdaptiveState field nudged by self-modification"
    )
    parent_ids: tuple[str, ...] = Field(default=())
    pressures: tuple[str, ...] = Field(
        default=(), description="Environmental pressures active at the time"
    )

    model_config = ConfigDict(frozen=True)


def new_individual_id(rng: random.Random) -> str:
    """UUID4-formatted id drawn from *rng* so seeded runs are reproducible."""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


class Individual(BaseModel):
    """A candidate solution: genome plus its decoded traits and running scores."""

    id: str = Field(description="Unique individual identifier")
    genome: Genome = Field(min_length=1, description="Genes, each in [0, 1]")
    fitness: UnitFloat = Field(default=0.0, description="Last evaluated fitness")
    generation: int = Field(default=0, ge=0, description="Generation of birth")
    mutation_count: int = Field(
        default=0, ge=0, description="Genes perturbed over this individual's lifetime"
    )
    parent_ids: list[str] = Field(
        default_factory=list, description="Empty, or exactly two parent ids"
    )
    traits: TraitSet
    performance: PerformanceMetrics
    adaptive_state: AdaptiveState
    history: list[EvolutionRecord] = Field(
        default_factory=list, description="Mutation records, oldest first"
    )

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    @field_validator("genome")
    @classmethod
    def validate_genome(cls, v: Genome) -> Genome:
        for i, gene in enumerate(v):
            if not 0.0 <= gene <= 1.0:
                raise ValueError(f"Gene {i} out of [0, 1]: {gene}")
        return v

    @field_validator("parent_ids")
    @classmethod
    def validate_parent_ids(cls, v: list[str]) -> list[str]:
        if len(v) not in (0, 2):
            raise ValueError(f"Expected 0 or 2 parent ids, got {len(v)}")
        return v

    @field_validator("id")
    @classmethod
    def validate_uuid(cls, v: str) -> str:
        try:
            uuid.UUID(v)
            return v
        except ValueError:
            raise ValueError("Invalid UUID format")

    @property
    def cognitive_score(self) -> float:
        return self.adaptive_state.mean()

    def set_genome(self, genome: Genome) -> None:
        """Replace the genome and refresh the decoded traits."""
        self.genome = genome
        self.traits = decode(genome)

    @classmethod
    def sample(
        cls, rng: random.Random, genome_length: int, generation: int = 0
    ) -> Individual:
        genome = tuple(rng.random() for _ in range(genome_length))
        return cls(
            id=new_individual_id(rng),
            genome=genome,
            generation=generation,
            traits=decode(genome),
            performance=PerformanceMetrics.sample(rng),
            adaptive_state=AdaptiveState.sample(rng),
        )
