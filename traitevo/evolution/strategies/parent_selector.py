from abc import ABC, abstractmethod
import random
from typing import Iterator

from traitevo.individuals.individual import Individual


class ParentSelector(ABC):
    """Abstract base class for selecting parents for reproduction."""

    @abstractmethod
    def select(self, population: list[Individual], rng: random.Random) -> Individual:
        """Pick one parent from *population*."""

    def create_parent_iterator(
        self, population: list[Individual], rng: random.Random
    ) -> Iterator[tuple[Individual, Individual]]:
        """Yield parent pairs forever (consumer controls the limit via break).

        The second parent is drawn from everyone but the first, so a pair holds
        two distinct individuals whenever the population has more than one.
        """
        if not population:
            return
        while True:
            parent1 = self.select(population, rng)
            others = [ind for ind in population if ind is not parent1] or population
            yield parent1, self.select(others, rng)


class TournamentParentSelector(ParentSelector):
    """Best of *tournament_size* individuals sampled uniformly with replacement."""

    def __init__(self, tournament_size: int = 5):
        if tournament_size < 1:
            raise ValueError(
                f"tournament_size must be at least 1, got {tournament_size}"
            )
        self.tournament_size = tournament_size

    def select(self, population: list[Individual], rng: random.Random) -> Individual:
        if not population:
            raise ValueError("Cannot run a tournament on an empty population")
        contenders = [
            population[rng.randrange(len(population))]
            for _ in range(self.tournament_size)
        ]
        # max() keeps the first contender among equal fitness
        return max(contenders, key=lambda ind: ind.fitness)
