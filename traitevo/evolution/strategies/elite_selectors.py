from abc import ABC, abstractmethod
import math

from loguru import logger

from traitevo.individuals.individual import Individual


def rank_by_fitness(population: list[Individual]) -> list[Individual]:
    """Sort descending by fitness; ties keep insertion order."""
    return sorted(population, key=lambda ind: ind.fitness, reverse=True)


def elite_count(population_size: int, elitism_rate: float) -> int:
    return math.floor(population_size * elitism_rate)


class EliteSelector(ABC):
    @abstractmethod
    def __call__(self, ranked: list[Individual], total: int) -> list[Individual]:
        pass


class TopEliteSelector(EliteSelector):
    """Take the *total* best individuals of an already ranked population."""

    def __call__(self, ranked: list[Individual], total: int) -> list[Individual]:
        if total <= 0:
            return []
        if len(ranked) <= total:
            logger.debug(
                "[TopEliteSelector] Returning all {} individuals (requested {})",
                len(ranked),
                total,
            )
            return list(ranked)

        selected = ranked[:total]
        logger.debug(
            "[TopEliteSelector] Kept {} elites (fitness {:.3f}..{:.3f})",
            len(selected),
            selected[0].fitness,
            selected[-1].fitness,
        )
        return selected
