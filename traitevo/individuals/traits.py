from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from traitevo.individuals.bounds import UnitFloat


class Easing(Enum):
    """Temporal profiles, in the order the codec indexes them."""

    EASE_IN_OUT = "ease_in_out"
    EASE_OUT = "ease_out"
    EASE_IN = "ease_in"
    LINEAR = "linear"
    ANTICIPATE = "anticipate"
    BACK_IN_OUT = "back_in_out"
    CIRC_IN_OUT = "circ_in_out"
    EASE_IN_OUT_QUART = "ease_in_out_quart"


EASING_CATALOG: tuple[Easing, ...] = tuple(Easing)


class _TraitGroup(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Chromatics(_TraitGroup):
    hue: float = Field(description="Hue angle in degrees, 0.0 to 360.0")
    saturation: float = Field(description="Saturation percent, 40.0 to 100.0")
    lightness: float = Field(description="Lightness percent, 30.0 to 70.0")


class Geometry(_TraitGroup):
    width: float
    height: float
    scale: float
    corner_radius: float
    skew: float
    rotation: float


class TemporalProfile(_TraitGroup):
    duration: float = Field(description="Seconds, 0.3 to 2.3")
    easing: Easing
    intensity: UnitFloat


class Behavior(_TraitGroup):
    responsiveness: UnitFloat
    adaptability: UnitFloat
    intelligence: UnitFloat

    @property
    def survival_score(self) -> float:
        return (
            self.adaptability * 0.4
            + self.intelligence * 0.3
            + self.responsiveness * 0.3
        )


class InteractionSensitivity(_TraitGroup):
    hover_sensitivity: UnitFloat
    click_response: UnitFloat
    gesture_recognition: UnitFloat


class VisualExtension(_TraitGroup):
    """Secondary fields fed by the genes after the primary block."""

    shadow_offset: float
    shadow_blur: float
    shadow_opacity: float
    gradient_angle: float
    border_width: float
    backdrop_blur: float
    saturation_boost: float
    entry_rotation: float
    hover_rotation: float
    hover_shadow_offset: float
    hover_shadow_blur: float
    hover_shadow_opacity: float


class TraitSet(_TraitGroup):
    """Read-only structured view of a genome."""

    chromatics: Chromatics
    geometry: Geometry
    temporal: TemporalProfile
    behavior: Behavior
    interaction: InteractionSensitivity
    extension: VisualExtension
