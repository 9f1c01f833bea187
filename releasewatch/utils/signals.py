"""Shutdown signal handling for watch mode."""

import logging
import signal
from threading import Event
from typing import Optional

logger = logging.getLogger(__name__)


def install_signal_handlers(shutdown_event: Optional[Event] = None) -> Event:
    """
    Install handlers for SIGINT and SIGTERM.

    Args:
        shutdown_event: Event to set on shutdown; a new one is created if omitted.

    Returns:
        Event that will be set when shutdown is requested.
    """
    if shutdown_event is None:
        shutdown_event = Event()

    def handler(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, stopping after the current cycle")
        shutdown_event.set()

    signal.signal(signal.SIGINT, handler)
    signal.signal(signal.SIGTERM, handler)

    return shutdown_event
