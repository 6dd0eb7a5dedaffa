"""CLI utilities shared by commands."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Generator
from zoneinfo import ZoneInfo

import typer

from schedule_feed.constants import TZID
from schedule_feed.exceptions import FeedError

logger = logging.getLogger(__name__)


@contextmanager
def exit_on_feed_error() -> Generator[None, None, None]:
    """Log feed errors and exit with status 1."""
    try:
        yield
    except FeedError as e:
        logger.error(f"{type(e).__name__}: {e}")
        raise typer.Exit(1)


def local_now() -> datetime:
    """Current Europe/Vienna civil time (naive)."""
    return datetime.now(ZoneInfo(TZID)).replace(tzinfo=None)
