"""CLI commands package."""

from cli.commands.bookings import bookings
from cli.commands.feed import feed
from cli.commands.month import month
from cli.commands.serve import serve
from cli.commands.token import token
from cli.commands.upcoming import upcoming

__all__ = [
    "bookings",
    "feed",
    "month",
    "serve",
    "token",
    "upcoming",
]
