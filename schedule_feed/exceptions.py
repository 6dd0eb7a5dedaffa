"""Exception hierarchy for the calendar feed pipeline."""


class FeedError(Exception):
    """Base exception for calendar feed operations."""

    pass


class ConfigurationError(FeedError):
    """Server configuration fault (e.g. missing calendar secret)."""

    pass


class TokenNotFoundError(FeedError):
    """Calendar token does not resolve to a user."""

    pass


class CollaboratorError(FeedError):
    """Schedule data could not be fetched from the backing store."""

    pass


class MalformedEventError(FeedError):
    """A schedule record cannot be turned into a calendar event."""

    pass
