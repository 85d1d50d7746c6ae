"""Genome codec: fixed affine and categorical mappings from genes to traits.

Every continuous trait is ``base + gene * span``; categorical traits bucket a
gene into ``min(floor(gene * k), k - 1)`` over a fixed ordered catalog.
Genes are read cyclically so genomes shorter than the codec's footprint still
decode (gene ``i`` is ``genome[i % len(genome)]``).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import NamedTuple, TypeVar

from traitevo.individuals.traits import (
    EASING_CATALOG,
    Behavior,
    Chromatics,
    Geometry,
    InteractionSensitivity,
    TemporalProfile,
    TraitSet,
    VisualExtension,
)

T = TypeVar("T")

Genome = tuple[float, ...]


class Affine(NamedTuple):
    gene: int
    base: float
    span: float


CHROMATICS = {
    "hue": Affine(0, 0.0, 360.0),
    "saturation": Affine(1, 40.0, 60.0),
    "lightness": Affine(2, 30.0, 40.0),
}

GEOMETRY = {
    "width": Affine(3, 100.0, 300.0),
    "height": Affine(4, 80.0, 200.0),
    "scale": Affine(5, 0.8, 0.4),
    "corner_radius": Affine(6, 0.0, 50.0),
    "skew": Affine(7, -10.0, 20.0),
    "rotation": Affine(8, -15.0, 30.0),
}

DURATION = Affine(9, 0.3, 2.0)
EASING_GENE = 10
INTENSITY = Affine(11, 0.0, 1.0)

BEHAVIOR = {
    "responsiveness": Affine(12, 0.0, 1.0),
    "adaptability": Affine(13, 0.0, 1.0),
    "intelligence": Affine(14, 0.0, 1.0),
}

INTERACTION = {
    "hover_sensitivity": Affine(15, 0.0, 1.0),
    "click_response": Affine(16, 0.0, 1.0),
    "gesture_recognition": Affine(17, 0.0, 1.0),
}

PRIMARY_GENES = 18

# Offsets relative to PRIMARY_GENES.
EXTENSION = {
    "shadow_offset": Affine(0, 0.0, 20.0),
    "shadow_blur": Affine(1, 0.0, 40.0),
    "shadow_opacity": Affine(2, 0.1, 0.3),
    "gradient_angle": Affine(3, 0.0, 360.0),
    "border_width": Affine(4, 1.0, 3.0),
    "backdrop_blur": Affine(5, 0.0, 10.0),
    "saturation_boost": Affine(6, 1.0, 1.0),
    "entry_rotation": Affine(7, -90.0, 180.0),
    "hover_rotation": Affine(8, -10.0, 20.0),
    "hover_shadow_offset": Affine(9, 20.0, 30.0),
    "hover_shadow_blur": Affine(10, 40.0, 60.0),
    "hover_shadow_opacity": Affine(11, 0.2, 0.3),
}

CODEC_FOOTPRINT = PRIMARY_GENES + len(EXTENSION)


def gene_at(genome: Sequence[float], index: int) -> float:
    return genome[index % len(genome)]


def affine(genome: Sequence[float], mapping: Affine, offset: int = 0) -> float:
    return mapping.base + gene_at(genome, offset + mapping.gene) * mapping.span


def categorical(gene: float, catalog: Sequence[T]) -> T:
    """Bucket *gene* into one of ``len(catalog)`` equal-width bins."""
    index = min(math.floor(gene * len(catalog)), len(catalog) - 1)
    return catalog[max(index, 0)]


def _fields(
    genome: Sequence[float], table: dict[str, Affine], offset: int = 0
) -> dict[str, float]:
    return {name: affine(genome, m, offset) for name, m in table.items()}


def decode(genome: Sequence[float]) -> TraitSet:
    """Decode *genome* into its TraitSet. Pure; the same genome always yields an equal TraitSet."""
    if not genome:
        raise ValueError("Cannot decode an empty genome")

    return TraitSet(
        chromatics=Chromatics(**_fields(genome, CHROMATICS)),
        geometry=Geometry(**_fields(genome, GEOMETRY)),
        temporal=TemporalProfile(
            duration=affine(genome, DURATION),
            easing=categorical(gene_at(genome, EASING_GENE), EASING_CATALOG),
            intensity=affine(genome, INTENSITY),
        ),
        behavior=Behavior(**_fields(genome, BEHAVIOR)),
        interaction=InteractionSensitivity(**_fields(genome, INTERACTION)),
        extension=VisualExtension(**_fields(genome, EXTENSION, PRIMARY_GENES)),
    )
