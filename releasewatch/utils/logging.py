"""Logging configuration.

Records may carry a ``channel`` extra (see ``channel_logger``); handlers set
up here render it as a ``[channel]`` tag in front of the message.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(channel_tag)s%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("urllib3", "slack_sdk")


class ChannelTagFilter(logging.Filter):
    """Add ``channel_tag`` to every record, empty unless ``channel`` is set."""

    def filter(self, record: logging.LogRecord) -> bool:
        channel = getattr(record, "channel", None)
        record.channel_tag = f"[{channel}] " if channel else ""
        return True


def channel_logger(logger: logging.Logger, channel: str) -> logging.LoggerAdapter:
    """Wrap ``logger`` so every record it emits is tagged with ``channel``."""
    return logging.LoggerAdapter(logger, {"channel": channel})


def _build_handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler.addFilter(ChannelTagFilter())
    return handler


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Enable DEBUG level logging.
        log_file: Optional file path for logging.
    """
    handlers: List[logging.Handler] = [_build_handler(logging.StreamHandler(sys.stderr))]

    if log_file:
        log_file = Path(log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_build_handler(logging.FileHandler(log_file)))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=handlers,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
