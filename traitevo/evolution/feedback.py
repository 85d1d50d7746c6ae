"""Online metric updates driven by external interaction events.

Updates land on the individual immediately but only affect fitness at the next
evaluation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from traitevo.individuals.individual import Individual

ENGAGEMENT_DELTA = 0.05
EMPATHY_DELTA = 0.02
HOVER_APPEAL_DELTA = 0.03
CLICK_EFFECTIVENESS_DELTA = 0.04
CLICK_AWARENESS_DELTA = 0.03

PROXIMITY_THRESHOLD = 0.3
PROXIMITY_AWARENESS_DELTA = 0.01
PROXIMITY_ADAPTATION_DELTA = 0.02


@dataclass(frozen=True)
class Hover:
    pass


@dataclass(frozen=True)
class Click:
    pass


@dataclass(frozen=True)
class Gesture:
    name: str


@dataclass(frozen=True)
class Proximity:
    distance: float

    def __post_init__(self):
        if math.isnan(self.distance) or self.distance < 0:
            raise ValueError(f"distance must be a non-negative number, got {self.distance}")


InteractionEvent = Union[Hover, Click, Gesture, Proximity]


def apply_interaction(individual: Individual, event: InteractionEvent) -> None:
    perf = individual.performance
    state = individual.adaptive_state

    if isinstance(event, Proximity):
        if event.distance < PROXIMITY_THRESHOLD:
            state.nudge("awareness", PROXIMITY_AWARENESS_DELTA)
            perf.nudge("adaptation_success", PROXIMITY_ADAPTATION_DELTA)
        return

    if not isinstance(event, (Hover, Click, Gesture)):
        raise TypeError(f"Unsupported interaction event: {event!r}")

    perf.nudge("engagement", ENGAGEMENT_DELTA)
    state.nudge("empathy", EMPATHY_DELTA)

    if isinstance(event, Hover):
        perf.nudge("appeal", HOVER_APPEAL_DELTA)
    elif isinstance(event, Click):
        perf.nudge("effectiveness", CLICK_EFFECTIVENESS_DELTA)
        state.nudge("awareness", CLICK_AWARENESS_DELTA)
