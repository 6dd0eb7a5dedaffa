"""Shared CLI context with lazy-initialized dependencies."""

from schedule_feed import build_feed_service
from schedule_feed.config import FeedConfig
from schedule_feed.feed_service import FeedService
from schedule_feed.storage.json_repository import JSONScheduleRepository


class CLIContext:
    """Shared context with lazy-initialized dependencies for CLI commands.

    Usage:
        ctx = CLIContext()
        events = ctx.feed_service.events_for_user(1)
    """

    def __init__(self, verbose: bool = False, quiet: bool = False):
        """Initialize CLI context.

        Args:
            verbose: If True, enable info logging on the console
            quiet: If True, suppress non-error output
        """
        self.verbose = verbose
        self.quiet = quiet

        # Lazy-loaded dependencies
        self._config: FeedConfig | None = None
        self._repository: JSONScheduleRepository | None = None
        self._feed_service: FeedService | None = None

    @property
    def config(self) -> FeedConfig:
        """Get configuration (lazy-loaded)."""
        if self._config is None:
            self._config = FeedConfig.from_env()
        return self._config

    @property
    def repository(self) -> JSONScheduleRepository:
        """Get the schedule repository (lazy-loaded)."""
        if self._repository is None:
            self._repository = JSONScheduleRepository(self.config.data_file)
        return self._repository

    @property
    def feed_service(self) -> FeedService:
        """Get the feed service (lazy-loaded)."""
        if self._feed_service is None:
            self._feed_service = build_feed_service(self.config, self.repository)
        return self._feed_service


# Global context instance (set by Typer callback)
_ctx: CLIContext | None = None


def get_context() -> CLIContext:
    """Get the current CLI context.

    Raises:
        RuntimeError: If context not initialized
    """
    if _ctx is None:
        raise RuntimeError("CLI context not initialized. This should not happen.")
    return _ctx


def set_context(ctx: CLIContext) -> None:
    """Set the global CLI context."""
    global _ctx
    _ctx = ctx
