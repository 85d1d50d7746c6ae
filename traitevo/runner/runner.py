from __future__ import annotations

import asyncio
import contextlib

from loguru import logger
from pydantic import BaseModel, Field

from traitevo.evolution.engine import EvolutionEngine


class RunnerConfig(BaseModel):
    tick_interval: float = Field(default=2.0, gt=0, description="Seconds between ticks")
    max_generations: int | None = Field(
        default=None,
        gt=0,
        description="Maximum number of generations to run (None = unlimited)",
    )
    max_consecutive_errors: int = Field(default=3, gt=0)
    log_interval: int = Field(
        default=10, gt=0, description="Log engine stats every N generations"
    )


class EvolutionRunner:
    """
    External scheduler for an EvolutionEngine.

    Ticks run in a worker thread one at a time. ``stop()`` keeps new ticks from
    starting and waits for the one in flight; a generation is never cut short.
    """

    def __init__(
        self,
        *,
        engine: EvolutionEngine,
        config: RunnerConfig | None = None,
    ) -> None:
        self.engine = engine
        self.config = config or RunnerConfig()
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None
        self._consecutive_errors = 0
        self.ticks_completed = 0
        self.errors_encountered = 0

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running():
            logger.warning("[EvolutionRunner] already running")
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run(), name="evolution-runner")

    async def run(self) -> None:
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        stop_event = self._stop_event
        self._consecutive_errors = 0
        logger.info(
            "[EvolutionRunner] Start | interval={}s, max_generations={}",
            self.config.tick_interval,
            self.config.max_generations or "unlimited",
        )

        try:
            while not stop_event.is_set():
                if self._reached_generation_cap():
                    logger.info(
                        "[EvolutionRunner] Stop: max_generations={}",
                        self.config.max_generations,
                    )
                    break

                try:
                    await asyncio.to_thread(self.engine.tick)
                    self._consecutive_errors = 0
                    self.ticks_completed += 1
                    if self.ticks_completed % self.config.log_interval == 0:
                        self._log_stats()
                except Exception as exc:  # pylint: disable=broad-except
                    self._on_error(str(exc))
                    if self._consecutive_errors >= self.config.max_consecutive_errors:
                        logger.critical(
                            "[EvolutionRunner] Stop: {} consecutive errors",
                            self._consecutive_errors,
                        )
                        break

                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(
                        stop_event.wait(), timeout=self.config.tick_interval
                    )
        finally:
            logger.info(
                "[EvolutionRunner] Stopped after {} tick(s)", self.ticks_completed
            )

    async def stop(self) -> None:
        """Stop scheduling ticks and wait for the in-flight tick to finish."""
        if self._stop_event is not None:
            self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None

    def _reached_generation_cap(self) -> bool:
        cap = self.config.max_generations
        return cap is not None and self.ticks_completed >= cap

    def _on_error(self, msg: str) -> None:
        self._consecutive_errors += 1
        self.errors_encountered += 1
        logger.error("[EvolutionRunner] Error #{}: {}", self._consecutive_errors, msg)

    def _log_stats(self) -> None:
        s = self.engine.stats()
        logger.info(
            "[EvolutionRunner] gen={} | best={:.4f} avg={:.4f} cognitive={:.4f} mutations={} pressures={}",
            s.generation,
            s.best_fitness,
            s.average_fitness,
            s.average_cognitive_score,
            s.total_mutations,
            list(s.active_pressures) or "none",
        )

    async def __aenter__(self):
        self.start()
        await asyncio.sleep(0)  # yield to let it schedule
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()
