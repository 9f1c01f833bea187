"""CLI entry point for Release Watch."""

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_CONFIG_PATH, ConfigError, get_default_config_toml, load_config
from .core.dispatcher import NotificationDispatcher, build_channels
from .core.release import UNKNOWN_VERSION
from .core.scheduler import run_periodically
from .core.version import classify_difference
from .utils.logging import setup_logging
from .utils.signals import install_signal_handlers

logger = logging.getLogger("releasewatch")

DEFAULT_INTERVAL = 24 * 60 * 60


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="releasewatch",
        description="Notify operators when a newer upstream release is available",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log notifications instead of sending them",
    )

    parser.add_argument(
        "--current-version",
        help="Deployed version (overrides [application] version)",
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show default configuration and exit",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Print installed and latest version and exit without notifying",
    )

    parser.add_argument(
        "--test-channels",
        action="store_true",
        help="Send a test message on every enabled channel and exit",
    )

    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and check periodically",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL,
        help="Seconds between checks in watch mode (default: one day)",
    )

    args = parser.parse_args()

    if args.show_config:
        print(get_default_config_toml())
        return 0

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(verbose=args.verbose, log_file=config.log_file)

    if args.test_channels:
        channels = build_channels(config, dry_run=args.dry_run)
        if not channels:
            print("No channel is enabled. Enable [email] or [slack] in the config file.")
            print(f"Config path: {args.config}")
            return 1
        failed = 0
        for channel in channels:
            result = channel.send_test()
            if result.success:
                print(f"Test message sent on {result.channel}")
            else:
                print(f"Test message failed on {result.channel}: {result.error}")
                failed += 1
        return 1 if failed else 0

    current_version = args.current_version or config.application.version
    if not current_version:
        logger.error("Installed version unknown: set [application] version or pass --current-version")
        return 1

    dispatcher = NotificationDispatcher(dry_run=args.dry_run)

    if args.check:
        latest, severity = dispatcher.evaluate(config, current_version)
        print(f"Installed version: {current_version}")
        print(f"Latest version:    {latest}")
        if latest != UNKNOWN_VERSION:
            print(f"Difference:        {classify_difference(current_version, latest).value}")
        print(f"Would notify:      {severity.value}")
        return 0

    if args.watch:
        shutdown_event = install_signal_handlers()
        run_periodically(
            lambda: dispatcher.run(config, current_version),
            interval=args.interval,
            shutdown_event=shutdown_event,
        )
        return 0

    dispatcher.run(config, current_version)
    return 0


if __name__ == "__main__":
    sys.exit(main())
