import asyncio
from datetime import datetime, timezone
import time

import hydra
from hydra.utils import instantiate
from loguru import logger
from omegaconf import DictConfig

from traitevo.evolution.engine import EvolutionEngine
from traitevo.runner import EvolutionRunner, RunnerConfig
from traitevo.utils.logger_setup import setup_logger
from traitevo.utils.serve import serve_until_signal


async def run_experiment(cfg: DictConfig) -> None:
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("traitevo evolution run")
    logger.info("=" * 80)
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")

    try:
        logger.info("Step 1/3: Building engine...")
        engine: EvolutionEngine = instantiate(cfg.engine)
        runner_config: RunnerConfig = instantiate(cfg.runner)
        runner = EvolutionRunner(engine=engine, config=runner_config)
        logger.info(
            "Step 1/3: Complete (population={}, seed={})",
            engine.config.population_size,
            cfg.seed,
        )

        logger.info("Step 2/3: Evolving until generation cap or signal...")
        await serve_until_signal(runner)

        logger.info("Step 3/3: Final report")
        stats = engine.stats()
        logger.info(
            "  generation={} best={:.4f} avg={:.4f} mutations={}",
            stats.generation,
            stats.best_fitness,
            stats.average_fitness,
            stats.total_mutations,
        )
        for rank, entry in enumerate(engine.top_k(cfg.report_top_k), start=1):
            logger.info(
                "  #{} {} fitness={:.4f} easing={} survival={:.3f}",
                rank,
                entry.id,
                entry.fitness,
                entry.traits.temporal.easing.value,
                entry.traits.behavior.survival_score,
            )

    except KeyboardInterrupt:
        logger.info("Evolution run interrupted by user")
    except Exception as e:  # pylint: disable=broad-except
        logger.error(f"Evolution run failed: {e}")
        raise
    finally:
        duration = time.time() - start_time
        logger.info(f"Total duration: {duration:.2f} seconds")
        logger.info(f"End time: {datetime.now(timezone.utc).isoformat()}")
        logger.info("=" * 80)


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    log_file_path = setup_logger(
        log_dir=cfg.logging.log_dir,
        level=cfg.logging.level,
        rotation=cfg.logging.rotation,
        retention=cfg.logging.retention,
    )
    logger.info(
        "Working directory: {}.",
        hydra.core.hydra_config.HydraConfig.get().runtime.output_dir,
    )
    logger.info(f"Log file: {log_file_path}")
    asyncio.run(run_experiment(cfg))


if __name__ == "__main__":
    main()
