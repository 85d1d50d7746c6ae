from __future__ import annotations

import operator
import random
from enum import Enum
from typing import Callable, NamedTuple

from loguru import logger
from pydantic import BaseModel, Field

from traitevo.individuals.bounds import clamp_unit
from traitevo.individuals.traits import TraitSet


class Pressure(Enum):
    """Environmental pressures, in catalog order."""

    MOBILE_FIRST = "mobile_first"
    ACCESSIBILITY = "accessibility"
    PERFORMANCE = "performance"
    USER_ENGAGEMENT = "user_engagement"
    MINIMALISM = "minimalism"
    COHERENCE = "coherence"


PRESSURE_CATALOG: tuple[Pressure, ...] = tuple(Pressure)


class PressureRule(NamedTuple):
    trait: Callable[[TraitSet], float]
    compare: Callable[[float, float], bool]
    threshold: float


# MINIMALISM and COHERENCE have no rule and leave the score unchanged.
PRESSURE_RULES: dict[Pressure, PressureRule] = {
    Pressure.MOBILE_FIRST: PressureRule(lambda t: t.geometry.scale, operator.lt, 1.0),
    Pressure.ACCESSIBILITY: PressureRule(
        lambda t: t.chromatics.lightness, operator.gt, 50.0
    ),
    Pressure.PERFORMANCE: PressureRule(lambda t: t.temporal.duration, operator.lt, 1.0),
    Pressure.USER_ENGAGEMENT: PressureRule(
        lambda t: t.interaction.hover_sensitivity, operator.gt, 0.5
    ),
}


class EnvironmentDeltas(BaseModel):
    """Score adjustments applied per active pressure."""

    baseline: float = Field(default=0.5, ge=0.0, le=1.0)
    reward: float = Field(default=0.1, ge=0.0, le=1.0, description="Trait passes the rule")
    penalty: float = Field(default=0.05, ge=0.0, le=1.0, description="Trait fails the rule")


def adaptation_score(
    traits: TraitSet,
    pressures: tuple[Pressure, ...],
    deltas: EnvironmentDeltas | None = None,
) -> float:
    """Score how well *traits* suit the active *pressures*, in [0, 1]."""
    deltas = deltas or EnvironmentDeltas()
    score = deltas.baseline
    for pressure in pressures:
        rule = PRESSURE_RULES.get(pressure)
        if rule is None:
            continue
        if rule.compare(rule.trait(traits), rule.threshold):
            score += deltas.reward
        else:
            score -= deltas.penalty
    return clamp_unit(score)


class EnvironmentState:
    """Active pressure set, resampled every ``interval`` generations."""

    def __init__(
        self,
        *,
        interval: int = 10,
        probability: float = 0.3,
        max_active: int = 3,
    ):
        if interval < 1:
            raise ValueError(f"interval must be at least 1, got {interval}")
        self.interval = interval
        self.probability = probability
        self.max_active = max_active
        self._active: tuple[Pressure, ...] = ()

    @property
    def active(self) -> tuple[Pressure, ...]:
        return self._active

    def is_due(self, generation: int) -> bool:
        return generation > 0 and generation % self.interval == 0

    def resample(self, rng: random.Random) -> tuple[Pressure, ...]:
        chosen = [p for p in PRESSURE_CATALOG if rng.random() < self.probability]
        self._active = tuple(chosen[: self.max_active])
        logger.debug(
            "[Environment] Resampled pressures: {}",
            [p.value for p in self._active] or "none",
        )
        return self._active

    def maybe_adapt(self, generation: int, rng: random.Random) -> bool:
        """Resample when *generation* falls on the interval. Returns True if it did."""
        if not self.is_due(generation):
            return False
        self.resample(rng)
        return True
