"""Periodic execution of notification cycles."""

import logging
from threading import Event
from typing import Callable

logger = logging.getLogger(__name__)


def run_periodically(
    cycle: Callable[[], object],
    interval: float,
    shutdown_event: Event,
) -> int:
    """
    Run ``cycle`` every ``interval`` seconds until shutdown is requested.

    Cycles run one after another in the calling thread, so they never overlap.
    An exception in one cycle is logged and the loop carries on.

    Args:
        cycle: Callable running a single notification cycle.
        interval: Seconds to wait between cycles.
        shutdown_event: Event that stops the loop when set.

    Returns:
        Number of cycles run.
    """
    cycles = 0
    logger.info(f"Watching for new releases every {interval:g}s")

    while not shutdown_event.is_set():
        try:
            cycle()
        except Exception as e:
            logger.exception(f"Notification cycle failed: {e}")
        cycles += 1

        # Returns early when shutdown is requested
        shutdown_event.wait(timeout=interval)

    logger.info(f"Stopped after {cycles} cycle(s)")
    return cycles
