from __future__ import annotations

import math
from typing import Annotated

from pydantic import Field

UnitFloat = Annotated[float, Field(ge=0.0, le=1.0, allow_inf_nan=False)]
"""A finite scalar in the closed unit interval."""


def clamp_unit(value: float) -> float:
    """Clamp *value* into [0, 1]."""
    if math.isnan(value):
        raise ValueError("NaN cannot be clamped into [0, 1]")
    return max(0.0, min(1.0, value))


def signed_uniform(rng, magnitude: float) -> float:
    """Uniform sample in [-magnitude, magnitude)."""
    return (rng.random() - 0.5) * 2.0 * magnitude
