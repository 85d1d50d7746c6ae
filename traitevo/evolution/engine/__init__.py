from __future__ import annotations

from traitevo.evolution.engine.config import EngineConfig, build_config
from traitevo.evolution.engine.core import EvolutionEngine, RankedIndividual
from traitevo.evolution.engine.metrics import EngineMetrics, EngineStats
