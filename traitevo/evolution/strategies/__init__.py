from traitevo.evolution.strategies.elite_selectors import (
    EliteSelector,
    TopEliteSelector,
    elite_count,
    rank_by_fitness,
)
from traitevo.evolution.strategies.parent_selector import (
    ParentSelector,
    TournamentParentSelector,
)

__all__ = [
    "EliteSelector",
    "ParentSelector",
    "TopEliteSelector",
    "TournamentParentSelector",
    "elite_count",
    "rank_by_fitness",
]
