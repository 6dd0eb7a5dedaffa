"""CLI package for the schedule feed tool."""

import logging
import sys
from pathlib import Path

from schedule_feed.config import FeedConfig

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

# Third-party loggers kept at WARNING unless --verbose is given
NOISY_LOGGERS = ("werkzeug", "icalendar")


def console_level(verbose: bool = False, quiet: bool = False) -> int:
    """Console log level for the --verbose/--quiet flags (quiet wins)."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return logging.WARNING


def _file_handler(config: FeedConfig) -> logging.Handler:
    config.log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(config.log_dir / config.log_filename, encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    handler.setLevel(logging.DEBUG)
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logging(
    verbose: bool = False, quiet: bool = False, config: FeedConfig | None = None
) -> Path:
    """Send every record to the feed log file and warnings to stderr.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.

    Returns:
        Path of the log file.
    """
    config = config or FeedConfig.from_env()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(_file_handler(config))
    root_logger.addHandler(_console_handler(console_level(verbose, quiet)))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)

    return config.log_dir / config.log_filename


def main() -> None:
    """Main entry point for the CLI."""
    from cli.parser import app

    app()


__all__ = ["console_level", "main", "setup_logging"]
