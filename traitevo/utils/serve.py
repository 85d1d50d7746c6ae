import asyncio
import contextlib
import signal

from loguru import logger

from traitevo.runner.runner import EvolutionRunner


async def serve_until_signal(runner: EvolutionRunner) -> None:
    """
    Run *runner* until SIGINT/SIGTERM or until it finishes on its own, then
    stop it gracefully (the in-flight generation always completes).
    """
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _set() -> None:
        if not stop_event.is_set():
            logger.info("Stop signal received")
            stop_event.set()

    loop.add_signal_handler(signal.SIGINT, _set)
    loop.add_signal_handler(signal.SIGTERM, _set)

    try:
        runner.start()
        waiter = asyncio.create_task(stop_event.wait())
        monitored = [waiter] + ([runner.task] if runner.task else [])
        await asyncio.wait(monitored, return_when=asyncio.FIRST_COMPLETED)
        if not waiter.done():
            waiter.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await waiter

        await runner.stop()

    finally:
        loop.remove_signal_handler(signal.SIGINT)
        loop.remove_signal_handler(signal.SIGTERM)
