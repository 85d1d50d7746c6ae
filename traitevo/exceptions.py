class TraitEvoError(Exception):
    """Base for all traitevo exceptions."""

    pass


class ConfigError(TraitEvoError, ValueError):
    """Invalid engine or runner configuration."""

    pass


class UnknownIndividualError(TraitEvoError, KeyError):
    """No individual with the given id exists in the current population."""

    def __init__(self, individual_id: str):
        super().__init__(individual_id)
        self.individual_id = individual_id

    def __str__(self) -> str:
        return f"Unknown individual id: {self.individual_id!r}"


class EvolutionError(TraitEvoError):
    """Evolution process failures."""

    pass
