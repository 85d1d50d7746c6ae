from traitevo.runner.runner import EvolutionRunner, RunnerConfig

__all__ = ["EvolutionRunner", "RunnerConfig"]
